"""
Database module for FX Helper.

Provides SQLite database connection and models.
"""

from fxhelper.db.database import get_db, init_db, close_db, AsyncSessionLocal
from fxhelper.db.models import Base, JournalEntry

__all__ = [
    "get_db",
    "init_db",
    "close_db",
    "AsyncSessionLocal",
    "Base",
    "JournalEntry",
]
