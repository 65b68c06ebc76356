"""Factory for the configured text extraction engine"""
from typing import Dict, Type
import logging

from core.interfaces import ITextExtractor
from infrastructure.text_extractors import (
    BaseTextExtractor,
    EasyOCRExtractor,
    TesseractExtractor,
)
from infrastructure.pdf_text import PyMuPDFTextLayerReader
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

class TextExtractorFactory:
    """
    Creates text extractors by OCR engine name.
    Swap OCR engines (Tesseract/EasyOCR) via OCR_ENGINE without code changes.
    """

    def __init__(self, pdf_reader_class=None):
        self._ocr_strategies: Dict[str, Type[BaseTextExtractor]] = {
            "tesseract": TesseractExtractor,
            "easyocr": EasyOCRExtractor,
        }
        self.pdf_reader_class = pdf_reader_class or PyMuPDFTextLayerReader

    @property
    def available_engines(self):
        return list(self._ocr_strategies.keys())

    def create(self, engine: str = settings.OCR_ENGINE) -> ITextExtractor:
        """
        Build the extractor for an engine name.

        Raises:
            ValueError: If engine is unknown
        """
        engine = engine.lower()
        extractor_class = self._ocr_strategies.get(engine)
        if not extractor_class:
            available = ", ".join(self.available_engines)
            raise ValueError(f"Unknown OCR engine: '{engine}'. Available: {available}")

        logger.info(f"[OCR] Using engine: {engine}")
        return extractor_class(
            pdf_reader=self.pdf_reader_class(),
            min_chars=settings.MIN_EXTRACTED_CHARS,
            timeout_s=settings.OCR_TIMEOUT_SECONDS,
        )
