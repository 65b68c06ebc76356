import asyncio

import fitz
import pytest
import pytesseract

from core.domain import ErrorCode, FileKind
from core.exceptions import ExtractionError
from infrastructure.pdf_text import PyMuPDFTextLayerReader
from infrastructure.text_extractors import (
    NO_TEXT_LAYER_MESSAGE, NO_TEXT_MESSAGE, BaseTextExtractor, EasyOCRExtractor, TesseractExtractor
)
from services.extractor_factory import TextExtractorFactory

from tests.helpers import png_bytes


class FixedOCRExtractor(BaseTextExtractor):
    def __init__(self, text, delay=0.0, **kwargs):
        super().__init__(**kwargs)
        self.text = text
        self.delay = delay
        self.seen = []

    async def _extract_text_from_image(self, image, language):
        self.seen.append((image.mode, language))
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.text


def write_pdf(path, pages):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    doc.save(str(path))
    doc.close()
    return str(path)


def write_png(path):
    path.write_bytes(png_bytes())
    return str(path)


@pytest.mark.asyncio
async def test_pdf_text_layer_is_read(tmp_path):
    pdf = write_pdf(tmp_path / "notice.pdf", ["Page one says hello.", "", "Page three says goodbye."])
    extractor = FixedOCRExtractor("unused")

    text = await extractor.extract_text(pdf, FileKind.PDF, "en")

    assert "Page one says hello." in text
    assert "Page three says goodbye." in text
    assert extractor.seen == []


@pytest.mark.asyncio
async def test_pdf_without_text_layer_is_rejected(tmp_path):
    pdf = write_pdf(tmp_path / "scan.pdf", ["", ""])
    extractor = FixedOCRExtractor("unused")

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract_text(pdf, FileKind.PDF, "en")

    assert exc_info.value.message == NO_TEXT_LAYER_MESSAGE
    assert exc_info.value.error_code == ErrorCode.NO_TEXT_FOUND


def test_pdf_reader_joins_non_empty_pages(tmp_path):
    pdf = write_pdf(tmp_path / "doc.pdf", ["First", "", "Third"])

    reader = PyMuPDFTextLayerReader()

    assert len(reader.read_pages(pdf)) == 3
    assert reader.read(pdf) == "First\n\nThird"


@pytest.mark.asyncio
async def test_image_text_is_trimmed(tmp_path):
    image = write_png(tmp_path / "page.png")
    extractor = FixedOCRExtractor("   Government of Maharashtra notice   \n")

    text = await extractor.extract_text(image, FileKind.IMAGE, "mr")

    assert text == "Government of Maharashtra notice"
    assert extractor.seen == [("RGB", "mr")]


@pytest.mark.asyncio
async def test_short_ocr_text_is_rejected(tmp_path):
    image = write_png(tmp_path / "blank.png")
    extractor = FixedOCRExtractor("  abc  ")

    with pytest.raises(ExtractionError) as exc_info:
        await extractor.extract_text(image, FileKind.IMAGE, "en")

    assert exc_info.value.message == NO_TEXT_MESSAGE


@pytest.mark.asyncio
async def test_ocr_timeout(tmp_path):
    image = write_png(tmp_path / "slow.png")
    extractor = FixedOCRExtractor("plenty of text here", delay=1.0, timeout_s=0.05)

    with pytest.raises(ExtractionError, match="timed out"):
        await extractor.extract_text(image, FileKind.IMAGE, "en")


@pytest.mark.asyncio
async def test_unreadable_image_is_extraction_error(tmp_path):
    broken = tmp_path / "broken.png"
    broken.write_bytes(b"\x89PNG not really")
    extractor = FixedOCRExtractor("plenty of text here")

    with pytest.raises(ExtractionError):
        await extractor.extract_text(str(broken), FileKind.IMAGE, "en")


@pytest.mark.asyncio
@pytest.mark.parametrize("language, profile", [("hi", "hin"), ("ur", "urd"), ("xx", "eng")])
async def test_tesseract_uses_language_profile(tmp_path, monkeypatch, language, profile):
    calls = []

    def fake_image_to_string(image, lang):
        calls.append(lang)
        return "Recognized document text"

    monkeypatch.setattr(pytesseract, "image_to_string", fake_image_to_string)
    image = write_png(tmp_path / "page.png")

    text = await TesseractExtractor().extract_text(image, FileKind.IMAGE, language)

    assert text == "Recognized document text"
    assert calls == [profile]


def test_easyocr_language_list():
    assert EasyOCRExtractor._languages_for("en") == ["en"]
    assert EasyOCRExtractor._languages_for("hi") == ["hi", "en"]
    assert EasyOCRExtractor._languages_for("gu") == ["en"]


def test_factory_selects_engine():
    factory = TextExtractorFactory()

    assert isinstance(factory.create("tesseract"), TesseractExtractor)
    assert isinstance(factory.create("EasyOCR"), EasyOCRExtractor)
    with pytest.raises(ValueError):
        factory.create("paddle")
