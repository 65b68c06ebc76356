# services/simplify_service.py
import logging
from typing import Optional

from core.domain import ErrorCode, NewDocument, SimplifiedDocument
from core.exceptions import StorageError, ValidationError
from core.interfaces import (
    IDocumentRepository, ISimplifier, ITempFileStorage, ITextExtractor
)
from core.languages import is_supported
from utils.common import (
    decode_base64, estimate_decoded_size, parse_data_url, resolve_file_kind,
    sanitize_filename, validate_file_content
)
from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

NO_FILE_MESSAGE = "No file uploaded"


class SimplifyService:
    """Upload -> temp file -> text -> LLM -> stored document."""

    def __init__(
        self,
        extractor: ITextExtractor,
        simplifier: ISimplifier,
        document_repo: IDocumentRepository,
        temp_storage: ITempFileStorage,
        max_upload_bytes: int = settings.MAX_UPLOAD_BYTES,
    ):
        self.extractor = extractor
        self.simplifier = simplifier
        self.document_repo = document_repo
        self.temp_storage = temp_storage
        self.max_upload_bytes = max_upload_bytes

    def _too_large_message(self) -> str:
        limit_mb = self.max_upload_bytes // (1024 * 1024)
        return (
            f"File is too large. Please upload a file smaller than {limit_mb}MB. "
            "Try compressing the image or using a lower resolution."
        )

    async def simplify_upload(
        self,
        image_base64: Optional[str],
        language: str = "en",
        file_name: Optional[str] = None,
    ) -> SimplifiedDocument:
        """
        Run the full pipeline for one upload.

        Validation happens before anything touches disk; the upload is only
        decoded once its estimated size is within MAX_UPLOAD_BYTES.

        Raises:
            ValidationError: Missing/invalid/oversized upload or unknown language
            ExtractionError: No readable text
            UpstreamError, ParseError: LLM failures
        """
        if not image_base64 or not image_base64.strip():
            raise ValidationError(NO_FILE_MESSAGE)
        if not is_supported(language):
            raise ValidationError(
                f"Unsupported language: {language}", ErrorCode.UNSUPPORTED_LANGUAGE
            )

        mime_type, payload = parse_data_url(image_base64)
        if estimate_decoded_size(payload) > self.max_upload_bytes:
            raise ValidationError(self._too_large_message(), ErrorCode.FILE_TOO_LARGE)

        safe_name = sanitize_filename(file_name) if file_name else None
        file_kind, extension = resolve_file_kind(mime_type, safe_name)

        content = decode_base64(payload)
        if not content:
            raise ValidationError(NO_FILE_MESSAGE)
        validate_file_content(content, extension)

        logger.info(
            f"Processing upload: type={mime_type}, size={len(content)} bytes, language={language}"
        )

        temp_path = await self.temp_storage.save(content, extension)
        try:
            original_text = await self.extractor.extract_text(temp_path, file_kind, language)
            logger.info(f"Extracted {len(original_text)} characters")

            result = await self.simplifier.simplify(original_text, language)
            logger.info(
                f"Simplified to {len(result.simplified_text)} characters, "
                f"{len(result.glossary)} glossary terms"
            )

            document_id = await self._save_document(NewDocument(
                original_text=original_text,
                target_language=language,
                simplified_text=result.simplified_text,
                glossary=result.glossary,
                file_name=safe_name,
            ))

            return SimplifiedDocument(
                original_text=original_text,
                simplified_text=result.simplified_text,
                glossary=result.glossary,
                target_language=language,
                document_id=document_id,
            )
        finally:
            await self.temp_storage.delete(temp_path)

    async def _save_document(self, document: NewDocument) -> Optional[str]:
        # Save failures are logged; the caller still gets the result
        try:
            record = await self.document_repo.create(document)
            logger.info(f"Saved document {record.id}")
            return record.id
        except StorageError as e:
            logger.error(f"Failed to save document: {e}")
            return None
