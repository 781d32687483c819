"""
SQLAlchemy models for the FX Helper database.

Uses SQLite for local persistence of the trade journal.
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    DateTime,
    JSON,
    Index,
)
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class JournalEntry(Base):
    """
    Trade journal - one record per reviewed setup.
    Entry and result payloads are stored as sent by the client.
    """
    __tablename__ = "journal_entries"

    id = Column(String(64), primary_key=True)
    instrument = Column(String(20), nullable=False, index=True)
    preset = Column(String(50), nullable=False)

    entry = Column(JSON, nullable=False)  # {"direction": "long", "price": 1.0785, ...}
    result = Column(JSON, nullable=False)  # {"pnlPips": 12.5, "outcome": "TP1", ...}

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        Index("ix_journal_instrument_created", "instrument", "created_at"),
    )
