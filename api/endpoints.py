# api/endpoints.py
import asyncio
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from api.schemas import (
    BulkDeleteResponse, DocumentResponse, ExportRequest, HealthResponse,
    LanguageItem, SimplifyRequest, SimplifyResponse, SuccessResponse,
    SuggestionCreate, SuggestionResponse
)
from config import settings
from core.exceptions import ValidationError
from core.interfaces import IDocumentRepository, IExportRenderer, ISuggestionRepository
from core.languages import SUPPORTED_LANGUAGES
from services.factory import (
    get_document_repository, get_image_renderer, get_pdf_renderer,
    get_simplify_service, get_suggestion_repository
)
from services.simplify_service import SimplifyService

logger = logging.getLogger(settings.LOGGER_NAME)

router = APIRouter(prefix="/api")

INVALID_SUGGESTION_MESSAGE = (
    f"Invalid suggestion. Please provide at least {settings.SUGGESTION_MIN_LENGTH} characters."
)


async def _export_response(renderer: IExportRenderer, body: ExportRequest) -> Response:
    # Pillow/reportlab work runs off the event loop
    content = await asyncio.to_thread(
        renderer.render,
        body.simplified_text,
        [g.to_domain() for g in body.glossary],
        body.target_language,
    )
    filename = f"simplified-document.{renderer.file_extension}"
    return Response(
        content=content,
        media_type=renderer.media_type,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


# ============= Simplification =============

@router.post("/simplify", response_model=SimplifyResponse)
async def simplify_document(
    request: SimplifyRequest,
    service: SimplifyService = Depends(get_simplify_service),
) -> SimplifyResponse:
    result = await service.simplify_upload(
        request.image_base64,
        language=request.language,
        file_name=request.file_name,
    )
    return SimplifyResponse.from_domain(result)


# ============= Documents =============

@router.get("/documents", response_model=List[DocumentResponse])
async def list_documents(
    repo: IDocumentRepository = Depends(get_document_repository),
) -> List[DocumentResponse]:
    documents = await repo.list_recent(settings.DOCUMENT_LIST_LIMIT)
    return [DocumentResponse.from_domain(doc) for doc in documents]


@router.get("/documents/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: str,
    repo: IDocumentRepository = Depends(get_document_repository),
) -> DocumentResponse:
    document = await repo.get_by_id(document_id)
    if document is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Document not found")
    return DocumentResponse.from_domain(document)


@router.delete("/documents/{document_id}", response_model=SuccessResponse)
async def delete_document(
    document_id: str,
    repo: IDocumentRepository = Depends(get_document_repository),
) -> SuccessResponse:
    await repo.delete(document_id)
    logger.info(f"Deleted document {document_id}")
    return SuccessResponse()


@router.delete("/documents", response_model=BulkDeleteResponse)
async def delete_all_documents(
    repo: IDocumentRepository = Depends(get_document_repository),
) -> BulkDeleteResponse:
    deleted = await repo.delete_all()
    logger.info(f"Deleted all documents ({deleted})")
    return BulkDeleteResponse(deleted_count=deleted)


# ============= Suggestions =============

@router.post("/suggestions", response_model=SuggestionResponse)
async def create_suggestion(
    request: SuggestionCreate,
    repo: ISuggestionRepository = Depends(get_suggestion_repository),
) -> SuggestionResponse:
    if len(request.message) < settings.SUGGESTION_MIN_LENGTH:
        raise ValidationError(INVALID_SUGGESTION_MESSAGE)
    suggestion = await repo.create(request.message)
    return SuggestionResponse.from_domain(suggestion)


@router.get("/suggestions", response_model=List[SuggestionResponse])
async def list_suggestions(
    repo: ISuggestionRepository = Depends(get_suggestion_repository),
) -> List[SuggestionResponse]:
    suggestions = await repo.list_recent()
    return [SuggestionResponse.from_domain(s) for s in suggestions]


# ============= Downloads =============

@router.post("/download/pdf")
async def download_pdf(
    body: ExportRequest,
    renderer: IExportRenderer = Depends(get_pdf_renderer),
) -> Response:
    return await _export_response(renderer, body)


@router.post("/download/image")
async def download_image(
    body: ExportRequest,
    renderer: IExportRenderer = Depends(get_image_renderer),
) -> Response:
    if not body.simplified_text.strip():
        raise ValidationError("Simplified text is required")
    return await _export_response(renderer, body)


# ============= Info =============

@router.get("/languages", response_model=List[LanguageItem])
async def list_languages() -> List[LanguageItem]:
    return [
        LanguageItem(code=lang.code, name=lang.name, native_name=lang.native_name)
        for lang in SUPPORTED_LANGUAGES
    ]


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    state = request.app.state
    return HealthResponse(
        status="ok",
        storage=state.storage.backend,
        ocr_engine=settings.OCR_ENGINE,
        llm_model=settings.LLM_MODEL_NAME,
        llm_configured=bool(settings.LLM_API_KEY),
    )
