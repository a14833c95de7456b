"""
Dependency injection

Dependencies wired through FastAPI Depends.
"""

from typing import AsyncGenerator

from fastapi import Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import IJournalSource
from core.config.loader import Settings, get_settings
from core.storage.journal_store import JournalStore


def get_app_settings() -> Settings:
    """Application settings"""
    return get_settings()


async def get_db() -> AsyncGenerator[SQLiteAdapter, None]:
    """DB session (read-only)

    The journal never writes to the back-office tables.
    """
    settings = get_settings()
    async with SQLiteAdapter(settings.db_path, readonly=True) as db:
        yield db


def get_journal_source(db: SQLiteAdapter = Depends(get_db)) -> IJournalSource:
    """Journal finder over the request's DB session

    Tests override this with an in-memory source.
    """
    return JournalStore(db)
