import asyncio
import os
import logging
import uuid
from pathlib import Path
from typing import Union

from core.interfaces import ITempFileStorage

from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

class LocalTempFileStorage(ITempFileStorage):
    """Writes uploads to a scratch directory on the local disk."""

    def __init__(self, base_path: Union[str, Path]):
        self.base_path = Path(base_path)
        # Create the directory if it doesn't exist
        try:
            self.base_path.mkdir(parents=True, exist_ok=True)
            logger.info(f"Temp upload directory ensured at: {self.base_path}")
        except Exception as e:
            logger.error(f"Could not create temp directory at {self.base_path}: {e}")
            raise

    async def save(self, content: bytes, extension: str) -> str:
        """Saves bytes under a fresh UUID-based name."""
        file_path = self.base_path / f"{uuid.uuid4().hex}.{extension}"
        try:
            await asyncio.to_thread(file_path.write_bytes, content)
            logger.info(f"Saved upload to {file_path} ({len(content)} bytes)")
            return str(file_path)
        except Exception as e:
            logger.error(f"Failed to save file to {file_path}: {e}")
            raise

    async def delete(self, file_path: str) -> bool:
        """Deletes a temp file. Never raises."""
        try:
            path = Path(file_path)
            if path.exists():
                os.unlink(path)
                logger.info(f"Deleted temp file: {path}")
                return True
            logger.warning(f"Attempted to delete non-existent file: {path}")
            return False
        except OSError as e:
            logger.error(f"Error deleting temp file {file_path}: {e}")
            return False
