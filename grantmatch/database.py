"""
Database connection: PostgreSQL in production, async SQLite locally.

Env vars (see grantmatch.config):
    DATABASE_URL  -- full postgres:// connection string
    DATABASE_URL_FALLBACK -- sqlite+aiosqlite:///./grantmatch.db for local dev
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from grantmatch import config


def resolve_database_url(raw_url: str, fallback: str) -> str:
    """Normalise a postgres:// URL for asyncpg, or use the sqlite fallback."""
    if not raw_url:
        return fallback
    # Hosting platforms hand out postgres:// but asyncpg needs postgresql+asyncpg://
    if raw_url.startswith("postgres://"):
        return raw_url.replace("postgres://", "postgresql+asyncpg://", 1)
    if raw_url.startswith("postgresql://"):
        return raw_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return raw_url


DATABASE_URL = resolve_database_url(config.DATABASE_URL, config.DATABASE_URL_FALLBACK)

engine = create_async_engine(DATABASE_URL, echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def init_db():
    """Create all tables (safe to call multiple times)."""
    # models must be imported so their tables are registered on Base.metadata
    from grantmatch import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_session() -> AsyncSession:
    async with async_session() as session:
        yield session
