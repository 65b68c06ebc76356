"""Closed set of supported target languages."""
from dataclasses import dataclass
from typing import Dict, List, Optional

DEFAULT_LANGUAGE = "en"
FALLBACK_TESSERACT_PROFILE = "eng"


@dataclass(frozen=True)
class Language:
    code: str
    name: str
    native_name: str
    tesseract_profile: str
    script: str
    easyocr_code: Optional[str] = None  # None when EasyOCR has no model for it


SUPPORTED_LANGUAGES: List[Language] = [
    Language("en", "English", "English", "eng", "latin", "en"),
    Language("hi", "Hindi", "हिन्दी", "hin", "devanagari", "hi"),
    Language("mr", "Marathi", "मराठी", "mar", "devanagari", "mr"),
    Language("gu", "Gujarati", "ગુજરાતી", "guj", "gujarati"),
    Language("ta", "Tamil", "தமிழ்", "tam", "tamil", "ta"),
    Language("te", "Telugu", "తెలుగు", "tel", "telugu", "te"),
    Language("kn", "Kannada", "ಕನ್ನಡ", "kan", "kannada", "kn"),
    Language("ml", "Malayalam", "മലയാളം", "mal", "malayalam"),
    Language("bn", "Bengali", "বাংলা", "ben", "bengali", "bn"),
    Language("pa", "Punjabi", "ਪੰਜਾਬੀ", "pan", "gurmukhi"),
    Language("or", "Odia", "ଓଡ଼ିଆ", "ori", "odia"),
    Language("ur", "Urdu", "اردو", "urd", "arabic", "ur"),
]

_BY_CODE: Dict[str, Language] = {lang.code: lang for lang in SUPPORTED_LANGUAGES}


def is_supported(code: str) -> bool:
    return code in _BY_CODE


def get_language(code: str) -> Optional[Language]:
    return _BY_CODE.get(code)


def language_name(code: str) -> str:
    """Display name for a code; unknown codes read as English."""
    lang = _BY_CODE.get(code)
    return lang.name if lang else _BY_CODE[DEFAULT_LANGUAGE].name


def tesseract_profile(code: str) -> str:
    lang = _BY_CODE.get(code)
    return lang.tesseract_profile if lang else FALLBACK_TESSERACT_PROFILE


def script_for(code: str) -> str:
    lang = _BY_CODE.get(code)
    return lang.script if lang else "latin"
