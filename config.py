# config.py
"""Application configuration"""
from typing import List, Optional
from pydantic_settings import BaseSettings
from utils.common import get_log_file_path, get_project_root

class Settings(BaseSettings):
    """Application configuration"""

    # Logger configuration
    LOG_FILE_PATH: str = get_log_file_path()
    LOGGER_NAME: str = "saraldocs"
    LOG_LEVEL: str = "INFO"  # console handler; the log file always gets DEBUG

    # Database (leave DATABASE_URL unset to use the in-memory store)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_RECYCLE: int = 3600  # Recycle connections after 1 hour

    # Document lifecycle
    DOCUMENT_TTL_DAYS: int = 7  # advisory only, nothing purges on expiry
    DOCUMENT_LIST_LIMIT: int = 50
    SUGGESTION_MIN_LENGTH: int = 10

    # Upload handling
    MAX_UPLOAD_BYTES: int = 8 * 1024 * 1024
    TEMP_DIR: str = f"{get_project_root()}/uploads/tmp"

    # Text extraction
    OCR_ENGINE: str = "tesseract"  # Options: tesseract, easyocr
    OCR_TIMEOUT_SECONDS: float = 300.0
    MIN_EXTRACTED_CHARS: int = 10

    # File type categorization
    IMAGE_EXTENSIONS: List[str] = ["jpg", "jpeg", "png", "gif", "bmp", "tiff", "webp"]
    DOCUMENT_EXTENSIONS: List[str] = ["pdf"]

    @property
    def ALLOWED_FILE_EXTENSIONS(self) -> List[str]:
        return self.IMAGE_EXTENSIONS + self.DOCUMENT_EXTENSIONS

    # LLM (any OpenAI-compatible chat-completions endpoint)
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL_NAME: str = "llama-3.3-70b-versatile"
    LLM_TEMPERATURE: float = 0.0
    LLM_MIN_OUTPUT_TOKENS: int = 4000
    LLM_MAX_OUTPUT_TOKENS: int = 12000  # provider hard cap
    LLM_STRICT_PARSING: bool = False
    LARGE_DOCUMENT_WARNING_CHARS: int = 50_000
    REQUEST_TIMEOUT: int = 120

    # Export rendering
    FONTS_DIR: str = f"{get_project_root()}/fonts"

    # App metadata
    APP_TITLE: str = "SaralDocs Simplifier"
    APP_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
