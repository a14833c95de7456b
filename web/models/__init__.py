"""
Web model package

Pydantic response schemas
"""

from web.models.responses import (
    ErrorResponse,
    HealthResponse,
    JournalEntryResponse,
    JournalMetaResponse,
    JournalResponse,
    JournalTotalsResponse,
    StatementsDataResponse,
    StatementsResponse,
    SummaryDataResponse,
    SummaryResponse,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "JournalEntryResponse",
    "JournalMetaResponse",
    "JournalResponse",
    "JournalTotalsResponse",
    "StatementsDataResponse",
    "StatementsResponse",
    "SummaryDataResponse",
    "SummaryResponse",
]
