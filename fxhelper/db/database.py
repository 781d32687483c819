"""
Database connection and session management.

Uses SQLite with aiosqlite for async support.
"""

import os
import logging
import uuid
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy import select
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from fxhelper.db.models import Base, JournalEntry
from fxhelper.core.config import settings

logger = logging.getLogger(__name__)


def _sqlite_path() -> str:
    """Configured path, or ./data/fxhelper.db next to the package."""
    if settings.sqlite_path:
        return settings.sqlite_path
    data_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "data")
    os.makedirs(data_dir, exist_ok=True)
    return os.path.join(data_dir, "fxhelper.db")


SQLITE_PATH = _sqlite_path()
DATABASE_URL = f"sqlite+aiosqlite:///{SQLITE_PATH}"

# Single shared SQLite connection
engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def init_db() -> None:
    """Create the journal tables if missing. Runs in the app lifespan."""
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except Exception as e:
        logger.error(f"Journal database unavailable at {SQLITE_PATH}: {e}")
        raise
    logger.info(f"Journal database: {SQLITE_PATH}")


async def close_db() -> None:
    await engine.dispose()
    logger.info("Journal database closed")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Request-scoped session; committed when the endpoint returns cleanly."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# CRUD helper functions

def new_journal_id() -> str:
    """jrnl_<UTC timestamp>_<random suffix>"""
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return f"jrnl_{stamp}_{uuid.uuid4().hex[:8]}"


async def add_journal_entry(session: AsyncSession, entry_data: dict) -> JournalEntry:
    """Store a journal entry."""
    entry = JournalEntry(id=new_journal_id(), **entry_data)
    session.add(entry)
    await session.flush()
    return entry


async def get_recent_journal_entries(
    session: AsyncSession, limit: int = 20, instrument: str = None
):
    """Get recent journal entries, newest first."""
    query = select(JournalEntry)
    if instrument:
        query = query.where(JournalEntry.instrument == instrument)
    result = await session.execute(
        query.order_by(JournalEntry.created_at.desc()).limit(limit)
    )
    return result.scalars().all()
