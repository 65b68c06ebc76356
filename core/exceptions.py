"""Error hierarchy with HTTP semantics for the simplification pipeline."""
from typing import Any, Dict, Optional

from fastapi import status

from core.domain import ErrorCode


class SimplifierError(Exception):
    """Base application error. Rendered as ``{"message", "errorCode"}``."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        self.message = message
        if error_code is not None:
            self.error_code = error_code
        super().__init__(message)

    def __str__(self):
        # Format used for logging
        return f"[{self.error_code.value}] {self.message}"

    def to_payload(self) -> Dict[str, Any]:
        return {"message": self.message, "errorCode": self.error_code.value}


class ValidationError(SimplifierError):
    """Bad or missing input, wrong file type, oversized payload."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.INVALID_INPUT


class ExtractionError(SimplifierError):
    """OCR failure, PDF without a text layer, or too little text."""
    status_code = status.HTTP_400_BAD_REQUEST
    error_code = ErrorCode.EXTRACTION_FAILED


class UpstreamError(SimplifierError):
    """The LLM call failed (network, rate limit, auth, empty answer)."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.LLM_FAILED


class ParseError(SimplifierError):
    """The LLM answer could not be turned into a structured result."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.PARSE_FAILED

    EXCERPT_LENGTH = 200

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.details = (raw_response or "")[: self.EXCERPT_LENGTH]

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["details"] = self.details
        return payload


class StorageError(SimplifierError):
    """The persistence backend failed."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code = ErrorCode.STORAGE_FAILED


RATE_LIMIT_MESSAGE = "API rate limit reached. Please wait a moment and try again."
TOO_LARGE_MESSAGE = "Document is too large to process. Please upload a smaller document."


def upstream_error_from_message(message: str) -> UpstreamError:
    """Map raw provider error text onto the user-facing categories."""
    if "rate_limit" in message:
        return UpstreamError(RATE_LIMIT_MESSAGE, ErrorCode.LLM_RATE_LIMITED)
    if "token" in message:
        return UpstreamError(TOO_LARGE_MESSAGE, ErrorCode.DOCUMENT_TOO_LARGE)
    return UpstreamError(message)
