import io
import logging
from typing import List

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from core.domain import GlossaryTerm
from core.interfaces import IExportRenderer
from core.languages import language_name
from infrastructure.fonts import PDF_FALLBACK_BOLD_FONT, PDF_FALLBACK_FONT, FontRegistry
from infrastructure.text_layout import wrap_text
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

TITLE = "SaralDocs - Simplified Document"
WATERMARK_TEXT = "SIMPLIFIED VERSION - NOT LEGALLY VERIFIED"
DISCLAIMER = (
    "Disclaimer: This is a simplified version of the original document, produced for "
    "understanding only. It is not legally verified. Always refer to the original "
    "document for official or legal purposes."
)
FOOTER = "Simplified Version - Not Legally Verified | Generated by SaralDocs"

MARGIN = 50
BODY_SIZE = 11
BODY_LEADING = 16
HEADING_SIZE = 14
SMALL_SIZE = 8


def _winansi_safe(text: str) -> str:
    """Replace characters the built-in Helvetica cannot encode."""
    return text.encode("cp1252", "replace").decode("cp1252")


class _PageWriter:
    """Cursor over a reportlab canvas: wraps lines, paginates, stamps each page."""

    def __init__(self, c: canvas.Canvas, font: str, bold_font: str, sanitize: bool):
        self.c = c
        self.font = font
        self.bold_font = bold_font
        self.sanitize = sanitize
        self.width, self.height = A4
        self.text_width = self.width - 2 * MARGIN
        self.page_number = 1
        self.y = self.height - MARGIN
        self._decorate_page()

    def _clean(self, text: str) -> str:
        return _winansi_safe(text) if self.sanitize else text

    def _decorate_page(self):
        # Watermark first so body text renders on top of it
        self.c.saveState()
        self.c.setFillColorRGB(0.5, 0.5, 0.5, alpha=0.08)
        self.c.setFont(PDF_FALLBACK_BOLD_FONT, 26)
        self.c.translate(self.width / 2, self.height / 2)
        self.c.rotate(30)
        for offset in range(-3, 4):
            self.c.drawCentredString(0, offset * 130, WATERMARK_TEXT)
        self.c.restoreState()

        self.c.saveState()
        self.c.setFont(PDF_FALLBACK_FONT, SMALL_SIZE)
        self.c.setFillColorRGB(0.4, 0.4, 0.4)
        self.c.drawCentredString(self.width / 2, MARGIN / 2, FOOTER)
        self.c.drawRightString(self.width - MARGIN, MARGIN / 2, f"Page {self.page_number}")
        self.c.restoreState()

    def _ensure_room(self, needed: float):
        if self.y - needed < MARGIN:
            self.c.showPage()
            self.page_number += 1
            self.y = self.height - MARGIN
            self._decorate_page()

    def space(self, amount: float):
        self.y -= amount

    def line(self, text: str, size: int = BODY_SIZE, bold: bool = False, indent: float = 0):
        self._ensure_room(size + 4)
        self.c.setFont(self.bold_font if bold else self.font, size)
        self.c.drawString(MARGIN + indent, self.y, self._clean(text))
        self.y -= size + 5

    def paragraph(self, text: str, size: int = BODY_SIZE, bold: bool = False, indent: float = 0):
        font = self.bold_font if bold else self.font
        measure = lambda s: stringWidth(s, font, size)
        for wrapped in wrap_text(self._clean(text), self.text_width - indent, measure):
            self._ensure_room(BODY_LEADING)
            if wrapped:
                self.c.setFont(font, size)
                self.c.drawString(MARGIN + indent, self.y, wrapped)
            self.y -= size + 5


class PdfExporter(IExportRenderer):
    """Renders a simplified document and its glossary as a paginated A4 PDF."""

    media_type = "application/pdf"
    file_extension = "pdf"

    def __init__(self, fonts: FontRegistry):
        self.fonts = fonts

    def render(self, simplified_text: str, glossary: List[GlossaryTerm], target_language: str) -> bytes:
        body_font = self.fonts.pdf_font(target_language)
        fallback = body_font == PDF_FALLBACK_FONT
        bold_font = PDF_FALLBACK_BOLD_FONT if fallback else body_font
        if fallback and target_language != "en":
            logger.warning(f"No font for '{target_language}' in {self.fonts.fonts_dir}, using {PDF_FALLBACK_FONT}")

        buf = io.BytesIO()
        c = canvas.Canvas(buf, pagesize=A4)
        c.setTitle(TITLE)
        c.setAuthor("SaralDocs")

        writer = _PageWriter(c, body_font, bold_font, sanitize=fallback)
        writer.line(TITLE, size=18, bold=True)
        writer.line(f"Output Language: {language_name(target_language)}", size=10)
        writer.space(10)

        writer.line("Simplified Version", size=HEADING_SIZE, bold=True)
        writer.space(4)
        writer.paragraph(simplified_text or "")

        if glossary:
            writer.space(14)
            writer.line("Glossary / Important Terms", size=HEADING_SIZE, bold=True)
            writer.space(4)
            for idx, item in enumerate(glossary, start=1):
                writer.paragraph(f"{idx}. {item.term}", bold=True)
                writer.paragraph(item.definition, indent=15)
                writer.space(4)

        writer.space(14)
        writer.paragraph(DISCLAIMER, size=9)

        c.save()
        data = buf.getvalue()
        logger.info(f"Rendered PDF export: {writer.page_number} page(s), {len(data)} bytes")
        return data
