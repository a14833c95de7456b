"""
Storage module

SQL access to the back-office tables: the journal finder (read side)
and a small writer used for seeding.
"""

from core.storage.backoffice_writer import BackOfficeWriter
from core.storage.journal_store import JournalStore

__all__ = [
    "BackOfficeWriter",
    "JournalStore",
]
