# infrastructure/image_exporter.py
"""
PNG rendering of a simplified document.

The whole document goes onto one tall image: header band, wrapped body text,
glossary, disclaimer, with a faint diagonal watermark over the page.
"""
import io
import logging
from dataclasses import dataclass
from typing import List

from PIL import Image, ImageDraw

from core.domain import GlossaryTerm
from core.interfaces import IExportRenderer
from core.languages import language_name
from infrastructure.fonts import FontRegistry
from infrastructure.text_layout import Measure, wrap_text
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

HEADER_TEXT = "SaralDocs - Simplified"
GLOSSARY_HEADING = "=== DETAILED GLOSSARY ==="
DISCLAIMER = (
    "DISCLAIMER: This simplified version is for understanding only. "
    "Use original document for official purposes."
)
WATERMARK_TEXT = "SIMPLIFIED VERSION"

HEADER_COLOR = (44, 90, 160)  # #2c5aa0
TEXT_COLOR = (33, 33, 33)
MUTED_COLOR = (110, 110, 110)


@dataclass
class LayoutLine:
    text: str
    style: str = "body"  # body | heading | term | definition | muted


class ImageExporter(IExportRenderer):
    """Renders the document as a single PNG."""

    media_type = "image/png"
    file_extension = "png"

    WIDTH = 1200
    PADDING = 40
    LINE_HEIGHT = 28
    HEADER_HEIGHT = 80
    FONT_SIZE = 20
    HEADER_FONT_SIZE = 30
    DEFINITION_INDENT = 30

    def __init__(self, fonts: FontRegistry):
        self.fonts = fonts

    def layout(
        self,
        simplified_text: str,
        glossary: List[GlossaryTerm],
        target_language: str,
        measure: Measure,
    ) -> List[LayoutLine]:
        """Lines to draw below the header, in order, already wrapped."""
        text_width = self.WIDTH - 2 * self.PADDING
        lines = [LayoutLine(f"Output Language: {language_name(target_language)}", "muted"), LayoutLine("")]

        lines.extend(LayoutLine(line) for line in wrap_text(simplified_text, text_width, measure))

        if glossary:
            lines += [LayoutLine(""), LayoutLine(GLOSSARY_HEADING, "heading"), LayoutLine("")]
            for idx, item in enumerate(glossary, start=1):
                lines.extend(
                    LayoutLine(line, "term")
                    for line in wrap_text(f"{idx}. {item.term}", text_width, measure)
                )
                lines.extend(
                    LayoutLine(line, "definition")
                    for line in wrap_text(item.definition, text_width - self.DEFINITION_INDENT, measure)
                )
                lines.append(LayoutLine(""))

        lines.append(LayoutLine(""))
        lines.extend(LayoutLine(line, "muted") for line in wrap_text(DISCLAIMER, text_width, measure))
        return lines

    def render(self, simplified_text: str, glossary: List[GlossaryTerm], target_language: str) -> bytes:
        font = self.fonts.image_font(target_language, self.FONT_SIZE)
        header_font = self.fonts.image_font("en", self.HEADER_FONT_SIZE)

        lines = self.layout(simplified_text, glossary, target_language, font.getlength)
        height = self.HEADER_HEIGHT + 2 * self.PADDING + len(lines) * self.LINE_HEIGHT

        img = Image.new("RGB", (self.WIDTH, height), "white")
        draw = ImageDraw.Draw(img)

        draw.rectangle([0, 0, self.WIDTH, self.HEADER_HEIGHT], fill=HEADER_COLOR)
        draw.text((self.PADDING, self.HEADER_HEIGHT // 2), HEADER_TEXT, fill="white", font=header_font, anchor="lm")

        y = self.HEADER_HEIGHT + self.PADDING
        for line in lines:
            if line.text:
                x = self.PADDING + (self.DEFINITION_INDENT if line.style == "definition" else 0)
                color = MUTED_COLOR if line.style == "muted" else (
                    HEADER_COLOR if line.style == "heading" else TEXT_COLOR
                )
                draw.text((x, y), line.text, fill=color, font=font)
            y += self.LINE_HEIGHT

        img = self._apply_watermark(img, header_font)

        buf = io.BytesIO()
        img.save(buf, "PNG", optimize=True)
        data = buf.getvalue()
        logger.info(f"[IMAGE] Rendered PNG export {self.WIDTH}x{height}, {len(data) / 1024:.0f}KB")
        return data

    def _apply_watermark(self, img: Image.Image, font) -> Image.Image:
        """Tile a rotated translucent label over the image."""
        tile = Image.new("RGBA", (self.WIDTH, 400), (0, 0, 0, 0))
        tile_draw = ImageDraw.Draw(tile)
        tile_draw.text(
            (self.WIDTH // 2, 200), WATERMARK_TEXT, fill=(120, 120, 120, 28), font=font, anchor="mm"
        )
        tile = tile.rotate(30, expand=True)

        base = img.convert("RGBA")
        overlay = Image.new("RGBA", base.size, (0, 0, 0, 0))
        x = (base.width - tile.width) // 2
        for y in range(self.HEADER_HEIGHT, base.height, tile.height // 2 or 1):
            overlay.paste(tile, (x, y), tile)
        return Image.alpha_composite(base, overlay).convert("RGB")
