# services/factory.py
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncEngine

from config import settings
from core.interfaces import (
    IDocumentRepository, IExportRenderer, ISimplifier, ISuggestionRepository,
    ITempFileStorage, ITextExtractor
)
from database.session import create_engine, create_session_factory, init_models
from infrastructure.file_storage import LocalTempFileStorage
from infrastructure.fonts import FontRegistry
from infrastructure.image_exporter import ImageExporter
from infrastructure.memory_repositories import InMemoryDocumentRepository, InMemorySuggestionRepository
from infrastructure.pdf_exporter import PdfExporter
from infrastructure.repositories import SQLDocumentRepository, SQLSuggestionRepository
from services.extractor_factory import TextExtractorFactory
from services.llm_service import DocumentSimplifier, LLMService
from services.simplify_service import SimplifyService

logger = logging.getLogger(settings.LOGGER_NAME)


@dataclass
class Storage:
    """The repositories chosen at startup, plus the engine when SQL-backed."""
    backend: str
    documents: IDocumentRepository
    suggestions: ISuggestionRepository
    engine: Optional[AsyncEngine] = None


# ============= Builders (called once from the lifespan) =============

async def build_storage(database_url: Optional[str] = settings.DATABASE_URL) -> Storage:
    """SQL repositories when a database URL is configured, in-memory otherwise."""
    if database_url:
        engine = create_engine(database_url)
        await init_models(engine)
        session_factory = create_session_factory(engine)
        logger.info("Using SQL storage")
        return Storage(
            backend="sql",
            documents=SQLDocumentRepository(session_factory, settings.DOCUMENT_TTL_DAYS),
            suggestions=SQLSuggestionRepository(session_factory),
            engine=engine,
        )

    logger.warning("DATABASE_URL not set, using in-memory storage (data is lost on restart)")
    return Storage(
        backend="memory",
        documents=InMemoryDocumentRepository(settings.DOCUMENT_TTL_DAYS),
        suggestions=InMemorySuggestionRepository(),
    )


def build_extractor(engine: str = settings.OCR_ENGINE) -> ITextExtractor:
    return TextExtractorFactory().create(engine)


def build_simplifier() -> ISimplifier:
    if not settings.LLM_API_KEY:
        logger.warning("LLM_API_KEY is not set, simplification requests will fail")
    llm = LLMService(
        base_url=settings.LLM_BASE_URL,
        model=settings.LLM_MODEL_NAME,
        api_key=settings.LLM_API_KEY,
        temperature=settings.LLM_TEMPERATURE,
        timeout=settings.REQUEST_TIMEOUT,
    )
    return DocumentSimplifier(llm, strict_parsing=settings.LLM_STRICT_PARSING)


def build_temp_storage() -> ITempFileStorage:
    return LocalTempFileStorage(base_path=settings.TEMP_DIR)


def build_renderers() -> Tuple[IExportRenderer, IExportRenderer]:
    """(pdf, png) exporters sharing one font registry."""
    fonts = FontRegistry(settings.FONTS_DIR)
    return PdfExporter(fonts), ImageExporter(fonts)


# ============= Request-scoped providers =============
# Handlers depend on these; tests swap them via app.dependency_overrides.

def get_document_repository(request: Request) -> IDocumentRepository:
    return request.app.state.storage.documents


def get_suggestion_repository(request: Request) -> ISuggestionRepository:
    return request.app.state.storage.suggestions


def get_extractor(request: Request) -> ITextExtractor:
    return request.app.state.extractor


def get_simplifier(request: Request) -> ISimplifier:
    return request.app.state.simplifier


def get_temp_storage(request: Request) -> ITempFileStorage:
    return request.app.state.temp_storage


def get_pdf_renderer(request: Request) -> IExportRenderer:
    return request.app.state.pdf_renderer


def get_image_renderer(request: Request) -> IExportRenderer:
    return request.app.state.image_renderer


def get_simplify_service(
    extractor: ITextExtractor = Depends(get_extractor),
    simplifier: ISimplifier = Depends(get_simplifier),
    document_repo: IDocumentRepository = Depends(get_document_repository),
    temp_storage: ITempFileStorage = Depends(get_temp_storage),
) -> SimplifyService:
    """
    Create the pipeline service with its collaborators injected.

    Each collaborator has its own provider, so tests can override one
    (e.g. the simplifier) and keep the rest.
    """
    return SimplifyService(
        extractor=extractor,
        simplifier=simplifier,
        document_repo=document_repo,
        temp_storage=temp_storage,
        max_upload_bytes=settings.MAX_UPLOAD_BYTES,
    )
