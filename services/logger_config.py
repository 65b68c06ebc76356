# services/logger_config.py
import logging
import os
from logging.handlers import RotatingFileHandler

from config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s'

# Third-party loggers that flood DEBUG output during OCR and PDF work
NOISY_LOGGERS = ("PIL", "urllib3", "fontTools", "asyncio")


def setup_logging():
    """
    Configures the application logger: a rotating file (DEBUG and above)
    plus the console (LOG_LEVEL and above). Safe to call more than once.
    """
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)
    logger.propagate = True

    formatter = logging.Formatter(LOG_FORMAT)

    try:
        log_dir = os.path.dirname(settings.LOG_FILE_PATH)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        file_handler = RotatingFileHandler(
            settings.LOG_FILE_PATH,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Error setting up file logger: {e}")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(settings.LOG_LEVEL.upper())
    logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.info(f"Logging configured (console level {settings.LOG_LEVEL.upper()}, file {settings.LOG_FILE_PATH})")
