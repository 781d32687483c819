"""
Journal Endpoints

Persist and list trade journal entries.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fxhelper.db.database import get_db, add_journal_entry, get_recent_journal_entries
from fxhelper.schemas.trade import (
    JournalWriteRequest,
    JournalWriteResponse,
    JournalEntryOut,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/write", response_model=JournalWriteResponse)
async def write_journal(request: JournalWriteRequest, db: AsyncSession = Depends(get_db)):
    """Store one journal entry and return its id."""
    entry = await add_journal_entry(db, request.model_dump())
    logger.info(f"Journal entry {entry.id} saved for {request.instrument}")
    return JournalWriteResponse(saved=True, id=entry.id)


@router.get("", response_model=list[JournalEntryOut])
async def list_journal(
    limit: int = Query(default=20, ge=1, le=200),
    instrument: Optional[str] = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    """Most recent journal entries, newest first."""
    entries = await get_recent_journal_entries(db, limit=limit, instrument=instrument)
    return [JournalEntryOut.model_validate(e) for e in entries]
