"""Splitting long documents into LLM-sized pieces.

The simplification pipeline sends whole documents in one call; this helper
exists for inputs that outgrow the provider's context window.
"""
from typing import List

from langchain_text_splitters import RecursiveCharacterTextSplitter

# Paragraphs first, then lines, then sentences (Devanagari danda included)
INDIC_AWARE_SEPARATORS: List[str] = [
    "\n\n", "\n", "।", ". ", "? ", "! ", " ", ""
]

DEFAULT_MAX_CHARS = 8000


def chunk_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> List[str]:
    """Split text into pieces of at most `max_chars`, preferring paragraph and sentence breaks."""
    if not text or not text.strip():
        return []
    if len(text) <= max_chars:
        return [text.strip()]

    splitter = RecursiveCharacterTextSplitter(
        chunk_size=max_chars,
        chunk_overlap=0,
        separators=INDIC_AWARE_SEPARATORS,
    )
    return [chunk for chunk in splitter.split_text(text) if chunk.strip()]
