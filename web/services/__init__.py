"""
Web service package

Request handling between the routes and the journal core
"""

from web.services.journal_service import JournalService

__all__ = [
    "JournalService",
]
