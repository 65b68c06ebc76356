# database/session.py

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable

from sqlalchemy import JSON, Column, DateTime, String, Text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (AsyncEngine, AsyncSession,
                                    async_sessionmaker, create_async_engine)
from sqlalchemy.orm import declarative_base

from config import settings

logger = logging.getLogger(settings.LOGGER_NAME)

Base = declarative_base()

SessionFactory = Callable[[], AsyncSession]

# --- SQLAlchemy Models ---

class DocumentEntity(Base):
    __tablename__ = "documents"
    id = Column(String, primary_key=True)
    original_text = Column(Text, nullable=False)
    simplified_text = Column(Text, nullable=True)
    target_language = Column(String(5), nullable=False)
    glossary = Column(JSON, nullable=True)
    file_name = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)

class SuggestionEntity(Base):
    __tablename__ = "suggestions"
    id = Column(String, primary_key=True)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)


# ============= Engine =============

def create_engine(database_url: str) -> AsyncEngine:
    """
    Build the async engine for the configured database.
    Pool sizing only applies to server databases (SQLite uses its own pool).
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_async_engine(database_url, echo=False)

    return create_async_engine(
        database_url,
        echo=False,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_pre_ping=True  # Check connection health before using
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(engine, expire_on_commit=False)


async def init_models(engine: AsyncEngine) -> None:
    """Create tables that do not exist yet."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


# ============= Session Factory =============

@asynccontextmanager
async def get_session(session_factory: SessionFactory) -> AsyncGenerator[AsyncSession, None]:
    """
    Create a new database session with proper cleanup.

    Repositories outlive requests, so each operation opens its own session.
    Ensures proper rollback on errors and explicit closure.
    """
    async with session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
