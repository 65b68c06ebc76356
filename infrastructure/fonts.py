"""Script-aware font lookup for the exporters.

Fonts are plain TTF files (Noto family) dropped into FONTS_DIR. Missing files
are not an error: PDFs fall back to Helvetica and PNGs to Pillow's bundled font.
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from PIL import ImageFont
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from core.languages import script_for
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

SCRIPT_FONT_FILES: Dict[str, str] = {
    "latin": "NotoSans-Regular.ttf",
    "devanagari": "NotoSansDevanagari-Regular.ttf",
    "gujarati": "NotoSansGujarati-Regular.ttf",
    "tamil": "NotoSansTamil-Regular.ttf",
    "telugu": "NotoSansTelugu-Regular.ttf",
    "kannada": "NotoSansKannada-Regular.ttf",
    "malayalam": "NotoSansMalayalam-Regular.ttf",
    "bengali": "NotoSansBengali-Regular.ttf",
    "gurmukhi": "NotoSansGurmukhi-Regular.ttf",
    "odia": "NotoSansOriya-Regular.ttf",
    "arabic": "NotoNaskhArabic-Regular.ttf",
}

PDF_FALLBACK_FONT = "Helvetica"
PDF_FALLBACK_BOLD_FONT = "Helvetica-Bold"


class FontRegistry:
    """Resolves the font to use for a target language."""

    def __init__(self, fonts_dir: Union[str, Path] = settings.FONTS_DIR):
        self.fonts_dir = Path(fonts_dir)
        self._registered_pdf_fonts: Dict[str, str] = {}

    def font_path(self, language: str) -> Optional[Path]:
        filename = SCRIPT_FONT_FILES.get(script_for(language))
        if not filename:
            return None
        path = self.fonts_dir / filename
        return path if path.is_file() else None

    def pdf_font(self, language: str) -> str:
        """reportlab font name for body text; registers the TTF on first use."""
        path = self.font_path(language)
        if path is None:
            return PDF_FALLBACK_FONT

        font_name = path.stem
        if font_name not in self._registered_pdf_fonts:
            try:
                pdfmetrics.registerFont(TTFont(font_name, str(path)))
            except Exception as e:
                logger.warning(f"Could not register font {path}: {e}")
                return PDF_FALLBACK_FONT
            self._registered_pdf_fonts[font_name] = str(path)
        return font_name

    def image_font(self, language: str, size: int):
        """Pillow font for `language` at `size` px."""
        path = self.font_path(language)
        if path is not None:
            try:
                return ImageFont.truetype(str(path), size)
            except OSError as e:
                logger.warning(f"Could not load font {path}: {e}")
        return ImageFont.load_default(size=size)
