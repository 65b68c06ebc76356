"""Core interfaces for the simplification service"""
from abc import ABC, abstractmethod
from typing import List, Optional

from core.domain import (
    DocumentRecord,
    FileKind,
    GlossaryTerm,
    NewDocument,
    SimplificationResult,
    SuggestionRecord,
)

# ============= Text Extractor Interface =============
class ITextExtractor(ABC):
    """Turns an uploaded file on disk into plain text (OCR or PDF text layer)."""

    @abstractmethod
    async def extract_text(self, file_path: str, file_kind: FileKind, language: str) -> str:
        """
        Extract best-effort plain text from a file.

        Args:
            file_path: Path of the temporary upload
            file_kind: Image or PDF
            language: Target language code, selects the OCR language profile

        Returns:
            Trimmed text, at least MIN_EXTRACTED_CHARS long

        Raises:
            ExtractionError: On engine failure or when too little text is found
        """
        pass

# ============= LLM Interface =============
class ISimplifier(ABC):
    """Produces a simplified rewrite and glossary for extracted text."""

    @abstractmethod
    async def simplify(self, text: str, language: str) -> SimplificationResult:
        """
        Raises:
            UpstreamError: If the LLM call fails
            ParseError: Only in strict parsing mode
        """
        pass

# ============= Repository Interfaces =============
class IDocumentRepository(ABC):
    """
    Interface for simplified document persistence.

    Implementations: SQLDocumentRepository, InMemoryDocumentRepository.
    Both assign ids/timestamps on create, list newest-first and treat
    deletes of unknown ids as no-ops.
    """

    @abstractmethod
    async def create(self, document: NewDocument) -> DocumentRecord:
        """Persist a finished simplification. expires_at = created_at + TTL."""
        pass

    @abstractmethod
    async def list_recent(self, limit: int) -> List[DocumentRecord]:
        """Newest first, at most `limit` records"""
        pass

    @abstractmethod
    async def get_by_id(self, document_id: str) -> Optional[DocumentRecord]:
        """Get document by ID, None if absent"""
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> None:
        """Delete document; unknown ids are ignored"""
        pass

    @abstractmethod
    async def delete_all(self) -> int:
        """Delete all documents, returns how many were removed"""
        pass


class ISuggestionRepository(ABC):
    """Interface for user suggestions"""

    @abstractmethod
    async def create(self, message: str) -> SuggestionRecord:
        pass

    @abstractmethod
    async def list_recent(self, limit: Optional[int] = None) -> List[SuggestionRecord]:
        """Newest first; all suggestions when limit is None"""
        pass

# ============= File Storage Interface =============
class ITempFileStorage(ABC):
    """Short-lived storage for uploads while they are being processed"""

    @abstractmethod
    async def save(self, content: bytes, extension: str) -> str:
        """Write bytes to a fresh uniquely named file, returns its path."""
        pass

    @abstractmethod
    async def delete(self, file_path: str) -> bool:
        """Remove a file written by save(). Missing files return False."""
        pass

# ============= Export Interface =============
class IExportRenderer(ABC):
    """Renders a simplification result into a downloadable file."""

    media_type: str
    file_extension: str

    @abstractmethod
    def render(
        self,
        simplified_text: str,
        glossary: List[GlossaryTerm],
        target_language: str,
    ) -> bytes:
        pass
