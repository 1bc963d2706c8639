"""Async database engine and session factory."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from app.core.config import Settings, get_settings


def engine_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``create_async_engine`` built from settings."""
    options: dict[str, Any] = {"echo": settings.database_echo}
    if make_url(settings.database_url).get_backend_name() != "sqlite":
        options["pool_size"] = settings.database_pool_size
        options["max_overflow"] = settings.database_max_overflow
    return options


settings = get_settings()

engine = create_async_engine(settings.database_url, **engine_options(settings))

async_session_factory = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency that yields an async DB session."""
    async with async_session_factory() as session:
        yield session


async def init_db() -> None:
    """Create any missing tables.

    Used for local runs and tests; deployments that run Alembic migrations
    set ``CREATE_TABLES_ON_STARTUP=false``.
    """
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
