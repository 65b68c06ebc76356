"""Process-local repositories used when no database is configured"""
import copy
import logging
import uuid
from datetime import timedelta
from typing import Dict, List, Optional

from core.interfaces import IDocumentRepository, ISuggestionRepository
from core.domain import DocumentRecord, NewDocument, SuggestionRecord
from utils.common import utc_now
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)


class InMemoryDocumentRepository(IDocumentRepository):
    """
    Dict-backed document store.

    State lives in this process only: it is lost on restart and not shared
    between workers.
    """

    def __init__(self, ttl_days: int = settings.DOCUMENT_TTL_DAYS):
        self._documents: Dict[str, DocumentRecord] = {}
        self.ttl = timedelta(days=ttl_days)

    async def create(self, document: NewDocument) -> DocumentRecord:
        created_at = utc_now()
        record = DocumentRecord(
            id=str(uuid.uuid4()),
            original_text=document.original_text,
            simplified_text=document.simplified_text,
            target_language=document.target_language,
            glossary=copy.deepcopy(document.glossary),
            file_name=document.file_name,
            created_at=created_at,
            expires_at=created_at + self.ttl,
        )
        self._documents[record.id] = record
        logger.info(f"Created document {record.id} in memory")
        return copy.deepcopy(record)

    async def list_recent(self, limit: int) -> List[DocumentRecord]:
        docs = sorted(self._documents.values(), key=lambda d: d.created_at, reverse=True)
        return [copy.deepcopy(d) for d in docs[:limit]]

    async def get_by_id(self, document_id: str) -> Optional[DocumentRecord]:
        doc = self._documents.get(document_id)
        return copy.deepcopy(doc) if doc else None

    async def delete(self, document_id: str) -> None:
        self._documents.pop(document_id, None)

    async def delete_all(self) -> int:
        deleted = len(self._documents)
        self._documents.clear()
        logger.info(f"Deleted {deleted} documents")
        return deleted


class InMemorySuggestionRepository(ISuggestionRepository):
    def __init__(self):
        self._suggestions: Dict[str, SuggestionRecord] = {}

    async def create(self, message: str) -> SuggestionRecord:
        record = SuggestionRecord(id=str(uuid.uuid4()), message=message, created_at=utc_now())
        self._suggestions[record.id] = record
        return copy.deepcopy(record)

    async def list_recent(self, limit: Optional[int] = None) -> List[SuggestionRecord]:
        items = sorted(self._suggestions.values(), key=lambda s: s.created_at, reverse=True)
        if limit is not None:
            items = items[:limit]
        return [copy.deepcopy(s) for s in items]
