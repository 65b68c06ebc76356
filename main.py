# main.py
"""Application entry point: wiring, lifespan and error rendering."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import settings
from core.domain import ErrorCode
from core.exceptions import SimplifierError
from services.logger_config import setup_logging
from services.factory import (
    build_extractor, build_renderers, build_simplifier, build_storage, build_temp_storage
)
from api.endpoints import router

setup_logging()
logger = logging.getLogger(settings.LOGGER_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    logger.info("Starting application...")

    app.state.storage = await build_storage(settings.DATABASE_URL)
    app.state.extractor = build_extractor(settings.OCR_ENGINE)
    app.state.simplifier = build_simplifier()
    app.state.temp_storage = build_temp_storage()
    app.state.pdf_renderer, app.state.image_renderer = build_renderers()
    logger.info(f"Services initialized (storage={app.state.storage.backend})")

    yield

    if app.state.storage.engine is not None:
        await app.state.storage.engine.dispose()
        logger.info("Database connections closed")
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.APP_TITLE,
    version=settings.APP_VERSION,
    lifespan=lifespan
)

app.include_router(router)


@app.exception_handler(SimplifierError)
async def handle_simplifier_error(_: Request, exc: SimplifierError):
    """Render pipeline errors as {"message", "errorCode"} with their status."""
    if exc.status_code >= 500:
        logger.error(f"Request failed: {exc}")
    else:
        logger.warning(f"Request rejected: {exc}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def handle_validation_error(_: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    )
    logger.warning(f"Invalid request data: {problems}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "message": "Invalid request data",
            "errorCode": ErrorCode.INVALID_INPUT.value,
            "details": problems,
        },
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(_: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )
