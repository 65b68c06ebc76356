# infrastructure/text_extractors.py
"""Text extraction implementations (OCR for images, text layer for PDFs)

Two OCR engines are available (Tesseract, EasyOCR). Both share the same
front half in BaseTextExtractor:

- PDFs go to the PyMuPDF text-layer reader. A PDF without selectable text is
  rejected with a message asking for an image upload instead.
- Images are opened with Pillow and handed to the engine-specific
  `_extract_text_from_image`, bounded by OCR_TIMEOUT_SECONDS.
- Anything shorter than MIN_EXTRACTED_CHARS counts as "no readable text".
"""
from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from PIL import Image

from core.interfaces import ITextExtractor
from core.domain import ErrorCode, FileKind
from core.exceptions import ExtractionError
from core.languages import get_language, tesseract_profile
from infrastructure.pdf_text import PyMuPDFTextLayerReader
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

NO_TEXT_MESSAGE = (
    "Could not extract text from the document. "
    "Please ensure the document is clear and contains readable text."
)
NO_TEXT_LAYER_MESSAGE = (
    "No readable text found in PDF. The PDF might be scanned/image-based. "
    "Please upload an image (JPG or PNG) of the document instead."
)


# -----------------------------
# Base Extractor
# -----------------------------
class BaseTextExtractor(ITextExtractor):
    """
    Base extractor that:
    - Reads the PDF text layer (no OCR fallback for scanned PDFs)
    - OCRs images using engine-specific _extract_text_from_image
    - Enforces the minimum readable-text length
    """
    def __init__(
        self,
        pdf_reader: Optional[PyMuPDFTextLayerReader] = None,
        *,
        min_chars: int = settings.MIN_EXTRACTED_CHARS,
        timeout_s: float = settings.OCR_TIMEOUT_SECONDS,
    ) -> None:
        self.pdf_reader = pdf_reader or PyMuPDFTextLayerReader()
        self.min_chars = min_chars
        self.timeout_s = timeout_s

    @abstractmethod
    async def _extract_text_from_image(self, image: Image.Image, language: str) -> str:
        """Engine-specific OCR -> plain text with reliable newlines."""
        raise NotImplementedError

    async def extract_text(self, file_path: str, file_kind: FileKind, language: str) -> str:
        if file_kind == FileKind.PDF:
            text = await self._extract_pdf_text(file_path)
            if len(text) < self.min_chars:
                raise ExtractionError(NO_TEXT_LAYER_MESSAGE, ErrorCode.NO_TEXT_FOUND)
        else:
            text = await self._extract_image_text(file_path, language)
            if len(text) < self.min_chars:
                raise ExtractionError(NO_TEXT_MESSAGE, ErrorCode.NO_TEXT_FOUND)

        logger.info(f"Extracted {len(text)} characters from {file_kind.value}")
        return text

    async def _extract_pdf_text(self, file_path: str) -> str:
        try:
            text = await self.pdf_reader.read_async(file_path)
        except Exception as e:
            logger.error(f"PDF text extraction failed: {e}")
            raise ExtractionError(f"Failed to extract text from PDF: {e}") from e
        return text.strip()

    async def _extract_image_text(self, file_path: str, language: str) -> str:
        try:
            image = await asyncio.to_thread(self._load_image, file_path)
            text = await asyncio.wait_for(
                self._extract_text_from_image(image, language),
                timeout=self.timeout_s,
            )
        except ExtractionError:
            raise
        except asyncio.TimeoutError as e:
            logger.error(f"OCR timed out after {self.timeout_s}s")
            raise ExtractionError("Text extraction timed out. Please try a smaller image.") from e
        except Exception as e:
            logger.error(f"OCR error: {e}", exc_info=True)
            raise ExtractionError(f"Failed to extract text from image: {e}") from e
        return (text or "").strip()

    @staticmethod
    def _load_image(file_path: str) -> Image.Image:
        with Image.open(file_path) as img:
            img.load()
            # Normalize to RGB for consistent OCR input
            return img.convert("RGB")


# -----------------------------
# Tesseract
# -----------------------------
class TesseractExtractor(BaseTextExtractor):
    """Tesseract OCR, language profile picked from the target language."""

    async def _extract_text_from_image(self, image: Image.Image, language: str) -> str:
        try:
            import pytesseract
        except Exception as e:
            raise ExtractionError(
                "Tesseract not available. Install tesseract-ocr with the needed language data."
            ) from e

        lang = tesseract_profile(language)
        logger.info(f"Using TesseractExtractor (lang={lang})")
        return await asyncio.to_thread(pytesseract.image_to_string, image, lang=lang)


# -----------------------------
# EasyOCR
# -----------------------------
class EasyOCRExtractor(BaseTextExtractor):
    """EasyOCR in paragraph mode. Readers are cached per language set."""

    _readers: Dict[Tuple[str, ...], Any] = {}

    @staticmethod
    def _languages_for(language: str) -> List[str]:
        lang = get_language(language)
        if lang is None or lang.easyocr_code is None or lang.easyocr_code == "en":
            return ["en"]
        return [lang.easyocr_code, "en"]

    async def _get_reader(self, languages: List[str]):
        key = tuple(languages)
        if key not in self._readers:
            logger.info(f"Loading EasyOCR reader for {languages}...")
            import easyocr  # type: ignore
            self._readers[key] = await asyncio.to_thread(easyocr.Reader, languages, gpu=False)
        return self._readers[key]

    async def _extract_text_from_image(self, image: Image.Image, language: str) -> str:
        import numpy as np

        reader = await self._get_reader(self._languages_for(language))
        logger.info("Using EasyOCRExtractor")
        results = await asyncio.to_thread(
            reader.readtext, np.array(image), detail=0, paragraph=True
        )
        return "\n".join(str(r) for r in results)
