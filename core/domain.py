"""Shared enumerations and domain models used across the application."""
from enum import Enum

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any, Optional

# ============= Enums =============

class ErrorCode(str, Enum):
    """Error codes for user-facing error messages."""
    INVALID_INPUT = "INVALID_INPUT"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    INVALID_FORMAT = "INVALID_FORMAT"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    NO_TEXT_FOUND = "NO_TEXT_FOUND"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    LLM_FAILED = "LLM_FAILED"
    LLM_RATE_LIMITED = "LLM_RATE_LIMITED"
    DOCUMENT_TOO_LARGE = "DOCUMENT_TOO_LARGE"
    PARSE_FAILED = "PARSE_FAILED"
    STORAGE_FAILED = "STORAGE_FAILED"


class FileKind(str, Enum):
    """What the extractor has to do with an uploaded file."""
    IMAGE = "image"
    PDF = "pdf"


# ============= Domain Models =============

@dataclass
class GlossaryTerm:
    """A token from the source document paired with a plain-language definition."""
    term: str
    definition: str

    def to_dict(self) -> Dict[str, str]:
        return {"term": self.term, "definition": self.definition}


@dataclass
class SimplificationResult:
    """What the LLM step produces for one document."""
    simplified_text: str
    glossary: List[GlossaryTerm] = field(default_factory=list)


@dataclass
class NewDocument:
    """Fields supplied by the caller when persisting a finished simplification."""
    original_text: str
    target_language: str
    simplified_text: Optional[str] = None
    glossary: List[GlossaryTerm] = field(default_factory=list)
    file_name: Optional[str] = None


@dataclass
class DocumentRecord:
    """Domain model for stored documents (immutable once created)"""
    id: str
    original_text: str
    simplified_text: Optional[str]
    target_language: str
    glossary: List[GlossaryTerm]
    file_name: Optional[str]
    created_at: datetime
    expires_at: datetime


@dataclass
class SuggestionRecord:
    """Domain model for user suggestions"""
    id: str
    message: str
    created_at: datetime


def glossary_from_raw(items: Any) -> List[GlossaryTerm]:
    """
    Build glossary terms from loosely typed data (LLM output, JSON columns).

    Entries without a non-empty term are dropped; definitions are coerced to str.
    """
    if not isinstance(items, list):
        return []

    terms: List[GlossaryTerm] = []
    for item in items:
        if isinstance(item, GlossaryTerm):
            term, definition = item.term, item.definition
        elif isinstance(item, dict):
            term, definition = item.get("term"), item.get("definition")
        else:
            continue
        if term is None or not str(term).strip():
            continue
        terms.append(GlossaryTerm(
            term=str(term).strip(),
            definition="" if definition is None else str(definition),
        ))
    return terms


@dataclass
class SimplifiedDocument:
    """Outcome of one upload: the extracted text and its simplification."""
    original_text: str
    simplified_text: str
    glossary: List[GlossaryTerm]
    target_language: str
    document_id: Optional[str] = None
