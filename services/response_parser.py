"""Best-effort recovery of the structured simplification from raw LLM text.

Stages run in a fixed order, each one looser than the last:

1. strip a leading BOM and surrounding whitespace
2. cut the outermost {...} region when the text is not already JSON
3. strip a leading ```/```json fence and a trailing ```
4. json.loads
5. regex-recover only "simplifiedText" (glossary left empty)
6. give up with ParseError

`parse_simplification` wraps the cascade; outside strict mode it never raises.
"""
import json
import logging
import re
from typing import Any, Dict

from core.domain import GlossaryTerm, SimplificationResult, glossary_from_raw
from core.exceptions import ParseError
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

BOM = "\ufeff"
UNSIMPLIFIED_PLACEHOLDER = "Unable to simplify the document."
FALLBACK_NOTE = GlossaryTerm(
    term="Note",
    definition="Document was simplified but structured glossary could not be generated.",
)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")
_SIMPLIFIED_TEXT = re.compile(r'"simplifiedText"\s*:\s*"((?:[^"\\]|\\.)*)"', re.DOTALL)


def _is_json(text: str) -> bool:
    try:
        json.loads(text)
        return True
    except ValueError:
        return False


def _outer_object(text: str) -> str:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return text
    return text[start:end + 1]


def _decode_json_string(body: str) -> str:
    try:
        return json.loads(f'"{body}"')
    except ValueError:
        return body


def extract_json_object(raw: str) -> Dict[str, Any]:
    """
    Run the repair cascade over raw model output.

    Returns the parsed object (or {"simplifiedText": ..., "glossary": []} from
    the regex stage).

    Raises:
        ParseError: When no stage recovers anything
    """
    cleaned = (raw or "").lstrip(BOM).strip()

    if not _is_json(cleaned):
        cleaned = _outer_object(cleaned)

    cleaned = _LEADING_FENCE.sub("", cleaned)
    cleaned = _TRAILING_FENCE.sub("", cleaned).strip()

    try:
        data = json.loads(cleaned)
        if isinstance(data, dict):
            return data
        logger.warning(f"LLM returned JSON {type(data).__name__}, expected an object")
    except ValueError:
        pass

    match = _SIMPLIFIED_TEXT.search(cleaned)
    if match:
        logger.warning("Recovered simplifiedText with regex, glossary dropped")
        return {"simplifiedText": _decode_json_string(match.group(1)), "glossary": []}

    raise ParseError(
        "Failed to parse AI response. The model may have returned an error.",
        raw_response=raw or "",
    )


def to_result(data: Dict[str, Any]) -> SimplificationResult:
    """Normalize a recovered object into a well-typed result."""
    simplified = data.get("simplifiedText")
    if not isinstance(simplified, str) or not simplified.strip():
        simplified = UNSIMPLIFIED_PLACEHOLDER
    return SimplificationResult(
        simplified_text=simplified,
        glossary=glossary_from_raw(data.get("glossary")),
    )


def fallback_result(raw: str) -> SimplificationResult:
    return SimplificationResult(
        simplified_text=raw if raw and raw.strip() else UNSIMPLIFIED_PLACEHOLDER,
        glossary=[GlossaryTerm(FALLBACK_NOTE.term, FALLBACK_NOTE.definition)],
    )


def parse_simplification(raw: str, strict: bool = False) -> SimplificationResult:
    """
    Turn raw model output into a SimplificationResult.

    Garbage input yields the degraded fallback (raw text plus one "Note"
    glossary entry) unless `strict` is set, in which case ParseError propagates.
    """
    try:
        return to_result(extract_json_object(raw))
    except ParseError as e:
        if strict:
            raise
        logger.warning(f"All JSON parsing attempts failed, using raw text: {e}")
        return fallback_result(raw)
