from __future__ import annotations

from collections.abc import AsyncGenerator
from typing import Any, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.core.config import settings


def engine_options(url: str) -> Dict[str, Any]:
    """
    Pool settings for the given async URL.

    PostgreSQL (asyncpg) gets pre-ping and periodic recycling.
    SQLite (aiosqlite, local dev and tests) keeps the defaults.
    """
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": False,
        "pool_pre_ping": True,
        "pool_recycle": 300,  # seconds
    }


def build_engine(url: str | None = None) -> AsyncEngine:
    # the clean URL drops sslmode/channel_binding, which asyncpg rejects
    url = url or settings.DATABASE_URL_ASYNC_CLEAN
    return create_async_engine(url, **engine_options(url))


def build_sessionmaker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # loaded rows stay readable after commit
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine: AsyncEngine = build_engine()
SiteHubSession = build_sessionmaker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    async with SiteHubSession() as session:
        yield session
