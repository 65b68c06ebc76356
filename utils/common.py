"""Common utilities: upload decoding, file validation, and path management"""
import base64
import binascii
import re
import os
import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional, Tuple
import logging

from core.domain import ErrorCode, FileKind
from core.exceptions import ValidationError

# ⚠️ DO NOT import settings here - causes circular import with config.py
# Settings is imported lazily inside functions that need it

def _get_logger():
    """Lazy logger initialization to avoid circular import"""
    from config import settings
    return logging.getLogger(settings.LOGGER_NAME)


# ============= Path Management =============

def get_project_root() -> str:
    """Returns the absolute path to the project's root directory."""
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def get_log_file_path() -> str:
    """Creates the log directory if it doesn't exist and returns the full log file path."""
    project_root = get_project_root()
    log_dir = os.path.join(project_root, 'log')

    if not os.path.exists(log_dir):
        os.makedirs(log_dir)

    return os.path.join(log_dir, 'saraldocs.log')


# ============= Upload Decoding =============

DATA_URL_PATTERN = re.compile(r'^data:([^;,]+)(?:;[^;,]*)*?;base64,(.*)$', re.DOTALL)
DEFAULT_MIME_TYPE = "application/octet-stream"

MIME_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/tiff": "tiff",
    "image/webp": "webp",
    "application/pdf": "pdf",
}


def parse_data_url(data_url: str) -> Tuple[str, str]:
    """Split a data URL into (mime_type, base64 payload). Bare base64 is octet-stream."""
    match = DATA_URL_PATTERN.match(data_url.strip())
    if match:
        return match.group(1).lower(), match.group(2)
    return DEFAULT_MIME_TYPE, data_url.strip()


def estimate_decoded_size(payload: str) -> int:
    """Size in bytes of a base64 payload once decoded, without decoding it."""
    return (len(payload) * 3) // 4


def decode_base64(payload: str) -> bytes:
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise ValidationError("Uploaded file is not valid base64 data", ErrorCode.INVALID_FORMAT)


def resolve_file_kind(mime_type: str, filename: Optional[str]) -> Tuple[FileKind, str]:
    """
    Decide how an upload is processed from its MIME type (or, for
    octet-stream uploads, from the filename extension).

    Returns (kind, extension). Raises ValidationError for anything else.
    """
    from config import settings  # Lazy import

    extension = MIME_EXTENSIONS.get(mime_type)
    if extension is None and mime_type == DEFAULT_MIME_TYPE and filename:
        candidate = get_file_extension(filename)
        if candidate in settings.ALLOWED_FILE_EXTENSIONS:
            extension = "jpg" if candidate == "jpeg" else candidate

    if extension is None:
        allowed = ", ".join(settings.ALLOWED_FILE_EXTENSIONS)
        raise ValidationError(
            f"Unsupported file type: {mime_type}. Allowed: {allowed}",
            ErrorCode.INVALID_FORMAT,
        )

    kind = FileKind.PDF if extension in settings.DOCUMENT_EXTENSIONS else FileKind.IMAGE
    return kind, extension


# ============= File Validation =============

def validate_file_content(content: bytes, extension: str) -> None:
    """Validates that file content matches its extension using magic number verification."""
    header = content[:16]

    if extension == 'pdf' and not header.startswith(b'%PDF'):
        raise ValidationError("Invalid PDF file", ErrorCode.INVALID_FORMAT)
    elif extension in ['jpg', 'jpeg'] and not header.startswith(b'\xff\xd8'):
        raise ValidationError("Invalid JPEG file", ErrorCode.INVALID_FORMAT)
    elif extension == 'png' and not header.startswith(b'\x89PNG'):
        raise ValidationError("Invalid PNG file", ErrorCode.INVALID_FORMAT)

    _get_logger().debug(f"Validated {extension} file content")


# ============= File Utilities =============

def sanitize_filename(filename: str) -> str:
    """Remove dangerous characters from filename."""
    safe_name = re.sub(r'[^\w\-_\.]', '_', filename)
    safe_name = os.path.basename(safe_name)
    return safe_name[:100]


def get_file_extension(filename: str) -> str:
    """Extracts and normalizes the file extension from a filename."""
    return Path(filename).suffix[1:].lower()


# ============= Time =============

_clock_lock = threading.Lock()
_last_timestamp: Optional[datetime] = None


def utc_now() -> datetime:
    """
    Timezone-aware UTC timestamp, strictly increasing within the process so
    that newest-first ordering never ties.
    """
    global _last_timestamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_timestamp is not None and now <= _last_timestamp:
            now = _last_timestamp + timedelta(microseconds=1)
        _last_timestamp = now
        return now
