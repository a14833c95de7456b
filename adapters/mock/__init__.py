"""
Mock adapters

In-memory implementations for tests.
They follow the Protocols so they can replace the real store.
"""

from adapters.mock.journal_source import (
    FinderCall,
    InMemoryJournalSource,
    StoreUnavailableError,
)

__all__ = [
    "FinderCall",
    "InMemoryJournalSource",
    "StoreUnavailableError",
]
