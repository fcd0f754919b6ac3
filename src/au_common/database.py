import logging
from collections.abc import Iterator
from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.au_common.errors import StorageUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


@lru_cache(maxsize=1)
def get_engine() -> AsyncEngine:
    """Created lazily so the in-memory backend never touches a database driver."""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=20,
        max_overflow=10,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StorageUnavailableError (fatal, never a rejection)."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.exception("Storage failure during %s", operation)
        raise StorageUnavailableError(f"Storage unavailable during {operation}") from exc
