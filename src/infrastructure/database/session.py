"""Database session management."""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from core.config import settings


def engine_connect_args(url: str) -> dict[str, Any]:
    """Driver arguments for ``url``.

    PostgreSQL sessions are pinned to UTC so ``timestamptz`` values and any
    server-side date arithmetic never depend on the server's zone. Civil-day
    math happens in the application only.
    """
    if url.startswith("postgresql+asyncpg://"):
        return {"server_settings": {"timezone": "UTC"}}
    return {}


# Create async engine
engine = create_async_engine(
    settings.async_database_url,
    echo=settings.debug,
    pool_pre_ping=True,
    connect_args=engine_connect_args(settings.async_database_url),
)

# Create async session factory
async_session_factory = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)
