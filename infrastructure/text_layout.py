"""Word wrapping shared by the PDF and PNG exporters."""
from typing import Callable, List

Measure = Callable[[str], float]


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """
    Wrap text to `max_width` using `measure` for string widths.

    Newlines are kept as paragraph breaks (blank input lines stay blank).
    Words wider than a whole line are broken by character.
    """
    lines: List[str] = []
    for paragraph in text.split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue

        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if measure(candidate) <= max_width:
                current = candidate
                continue

            if current:
                lines.append(current)
                current = ""

            if measure(word) <= max_width:
                current = word
                continue

            # Character-break very long tokens (URLs, reference codes)
            for ch in word:
                if current and measure(current + ch) > max_width:
                    lines.append(current)
                    current = ch
                else:
                    current += ch
        if current:
            lines.append(current)
    return lines
