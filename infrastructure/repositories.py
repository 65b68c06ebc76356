"""Database repository implementations"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError

from core.interfaces import IDocumentRepository, ISuggestionRepository
from core.domain import DocumentRecord, NewDocument, SuggestionRecord, glossary_from_raw
from core.exceptions import StorageError
from database.session import DocumentEntity, SessionFactory, SuggestionEntity, get_session
from utils.common import utc_now
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """SQLite hands back naive datetimes; everything we store is UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class SQLDocumentRepository(IDocumentRepository):
    def __init__(self, session_factory: SessionFactory, ttl_days: int = settings.DOCUMENT_TTL_DAYS):
        self.session_factory = session_factory
        self.ttl = timedelta(days=ttl_days)

    def _to_domain(self, db_doc: Optional[DocumentEntity]) -> Optional[DocumentRecord]:
        """Converts an SQLAlchemy entity to a domain model."""
        if db_doc is None:
            return None

        return DocumentRecord(
            id=db_doc.id, # type: ignore
            original_text=db_doc.original_text, # type: ignore
            simplified_text=db_doc.simplified_text, # type: ignore
            target_language=db_doc.target_language, # type: ignore
            glossary=glossary_from_raw(db_doc.glossary or []),
            file_name=db_doc.file_name, # type: ignore
            created_at=_as_utc(db_doc.created_at), # type: ignore
            expires_at=_as_utc(db_doc.expires_at), # type: ignore
        )

    async def create(self, document: NewDocument) -> DocumentRecord:
        created_at = utc_now()
        db_doc = DocumentEntity(
            id=str(uuid.uuid4()),
            original_text=document.original_text,
            simplified_text=document.simplified_text,
            target_language=document.target_language,
            glossary=[term.to_dict() for term in document.glossary],
            file_name=document.file_name,
            created_at=created_at,
            expires_at=created_at + self.ttl,
        )
        try:
            async with get_session(self.session_factory) as session:
                session.add(db_doc)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save document: {e}")
            raise StorageError(f"Failed to save document: {e}") from e

        logger.info(f"Created document {db_doc.id} in database")
        result = self._to_domain(db_doc)
        assert result is not None, "Created document should never be None"
        return result

    async def list_recent(self, limit: int) -> List[DocumentRecord]:
        try:
            async with get_session(self.session_factory) as session:
                result = await session.execute(
                    select(DocumentEntity)
                    .order_by(DocumentEntity.created_at.desc())
                    .limit(limit)
                )
                docs = [self._to_domain(doc) for doc in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list documents: {e}")
            raise StorageError("Failed to get documents") from e
        return [d for d in docs if d is not None]

    async def get_by_id(self, document_id: str) -> Optional[DocumentRecord]:
        try:
            async with get_session(self.session_factory) as session:
                db_doc = await session.get(DocumentEntity, document_id)
                return self._to_domain(db_doc)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load document {document_id}: {e}")
            raise StorageError("Failed to get document") from e

    async def delete(self, document_id: str) -> None:
        try:
            async with get_session(self.session_factory) as session:
                await session.execute(
                    delete(DocumentEntity).where(DocumentEntity.id == document_id)
                )
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to delete document {document_id}: {e}")
            raise StorageError("Failed to delete document") from e

    async def delete_all(self) -> int:
        try:
            async with get_session(self.session_factory) as session:
                result = await session.execute(delete(DocumentEntity))
                await session.commit()
                deleted = result.rowcount or 0
        except SQLAlchemyError as e:
            logger.error(f"Failed to clear documents: {e}")
            raise StorageError("Failed to clear documents") from e
        logger.info(f"Deleted {deleted} documents")
        return deleted


class SQLSuggestionRepository(ISuggestionRepository):
    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def _to_domain(self, entity: SuggestionEntity) -> SuggestionRecord:
        return SuggestionRecord(
            id=entity.id, # type: ignore
            message=entity.message, # type: ignore
            created_at=_as_utc(entity.created_at), # type: ignore
        )

    async def create(self, message: str) -> SuggestionRecord:
        entity = SuggestionEntity(id=str(uuid.uuid4()), message=message, created_at=utc_now())
        try:
            async with get_session(self.session_factory) as session:
                session.add(entity)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error(f"Failed to save suggestion: {e}")
            raise StorageError("Failed to submit suggestion") from e
        return self._to_domain(entity)

    async def list_recent(self, limit: Optional[int] = None) -> List[SuggestionRecord]:
        query = select(SuggestionEntity).order_by(SuggestionEntity.created_at.desc())
        if limit is not None:
            query = query.limit(limit)
        try:
            async with get_session(self.session_factory) as session:
                result = await session.execute(query)
                return [self._to_domain(s) for s in result.scalars().all()]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list suggestions: {e}")
            raise StorageError("Failed to get suggestions") from e
