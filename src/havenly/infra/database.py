"""Async database engine and session management.

With no ``DATABASE_URL`` configured the marketplace keeps its state in a
throwaway SQLite file under the system temp directory. The file is created
fresh by ``init_db`` and removed by ``dispose_db`` at shutdown, so nothing
outlives the process. Every session gets its own connection, so one
request's rollback never touches another request's uncommitted writes.
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from havenly.app.config import get_settings

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """SQLAlchemy declarative base for all models."""
    pass


def resolve_database_url(configured: str) -> tuple[str, Optional[Path]]:
    """Return the engine URL and, for the throwaway store, the file backing it."""
    if configured:
        return configured, None
    path = Path(tempfile.gettempdir()) / f"havenly-{os.getpid()}.db"
    return f"sqlite+aiosqlite:///{path}", path


settings = get_settings()

database_url, store_path = resolve_database_url(settings.database_url)

_is_sqlite = "sqlite" in database_url
_connect_args = {}
if _is_sqlite:
    _connect_args["check_same_thread"] = False
    _connect_args["timeout"] = 30  # wait for the single writer lock

engine = create_async_engine(database_url, echo=False, connect_args=_connect_args)

async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def _remove_store_files() -> None:
    if store_path is None:
        return
    for suffix in ("", "-wal", "-shm", "-journal"):
        Path(f"{store_path}{suffix}").unlink(missing_ok=True)


async def get_db():
    """FastAPI dependency: yield an async database session."""
    async with async_session() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create a fresh store and load the demo data set."""
    # Ensure models are registered with Base.metadata
    import havenly.domain.models  # noqa: F401

    _remove_store_files()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # WAL lets readers proceed while one request holds the write lock
    if _is_sqlite:
        async with engine.begin() as conn:
            await conn.execute(text("PRAGMA journal_mode=WAL"))

    if settings.seed_demo_data:
        from havenly.services.seed_service import seed_marketplace

        async with async_session() as session:
            stats = await seed_marketplace(session)
            await session.commit()
            if any(v > 0 for v in stats.values()):
                logger.info("Seeded demo marketplace: %s", stats)


async def dispose_db():
    """Close pooled connections and delete the throwaway store."""
    await engine.dispose()
    _remove_store_files()
    if store_path is not None:
        logger.info("Discarded marketplace store %s", store_path)
