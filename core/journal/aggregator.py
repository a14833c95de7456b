"""
Journal aggregator

Builds the unified accounting journal: fetches the selected source
categories concurrently, maps them to LedgerEntry, filters, sorts,
totals and paginates. Pure read; nothing is persisted.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from adapters.interfaces import IJournalSource
from core.constants import JournalDefaults
from core.journal.entry_builder import build_entries
from core.journal.sources import CATEGORY_SOURCES, CategorySource
from core.journal.types import (
    TYPE_FILTER_ALL,
    JournalCategory,
    JournalTotals,
    JournalType,
    LedgerEntry,
)
from core.utils.aio import gather_or_cancel
from core.utils.timezone import end_of_day, now_utc, parse_iso_datetime, to_iso_z

logger = logging.getLogger(__name__)


class JournalQueryError(ValueError):
    """Invalid journal request parameter"""

    pass


def _parse_date(name: str, value: str) -> datetime:
    try:
        return parse_iso_datetime(value)
    except ValueError as e:
        raise JournalQueryError(f"{name} is not an ISO date: {value!r}") from e


@dataclass(frozen=True)
class JournalQuery:
    """Resolved journal filters

    Build with `from_params` so that defaults and bounds are applied.
    """

    date_start: datetime
    date_end: datetime
    page: int = JournalDefaults.PAGE
    limit: int = JournalDefaults.LIMIT
    type_filter: str = TYPE_FILTER_ALL
    category: str = ""
    search: str = ""

    @classmethod
    def from_params(
        cls,
        page: int | None = None,
        limit: int | None = None,
        type_filter: str | None = None,
        category: str | None = None,
        search: str | None = None,
        date_start: str | None = None,
        date_end: str | None = None,
        now: datetime | None = None,
    ) -> JournalQuery:
        """Resolve raw request parameters

        - page is floored at 1, limit clamped to [10, 50]
        - dateFin defaults to now, dateDebut to 30 days before dateFin
        - dateFin is then moved to 23:59:59.999 so the range is inclusive

        Raises:
            JournalQueryError: a date is not ISO-8601
        """
        resolved_page = max(1, page if page is not None else JournalDefaults.PAGE)
        resolved_limit = min(
            JournalDefaults.MAX_LIMIT,
            max(JournalDefaults.MIN_LIMIT, limit if limit is not None else JournalDefaults.LIMIT),
        )

        end = _parse_date("dateFin", date_end) if date_end else (now or now_utc())
        if date_start:
            start = _parse_date("dateDebut", date_start)
        else:
            start = end - timedelta(days=JournalDefaults.WINDOW_DAYS)
        end = end_of_day(end)

        return cls(
            date_start=start,
            date_end=end,
            page=resolved_page,
            limit=resolved_limit,
            type_filter=(type_filter or TYPE_FILTER_ALL).strip(),
            category=(category or "").strip(),
            search=(search or "").strip().lower(),
        )

    def includes(self, category: JournalCategory, journal_type: JournalType) -> bool:
        """Whether a category has to be fetched at all

        Unknown filter values match nothing.
        """
        type_ok = self.type_filter == TYPE_FILTER_ALL or self.type_filter == journal_type.value
        category_ok = not self.category or self.category == category.value
        return type_ok and category_ok

    def matches_search(self, entry: LedgerEntry) -> bool:
        if not self.search:
            return True
        return (
            self.search in entry.label.lower()
            or self.search in entry.reference.lower()
        )


@dataclass(frozen=True)
class JournalResult:
    """One journal page plus totals over the whole filtered set"""

    entries: list[LedgerEntry]
    totals: JournalTotals
    total: int
    page: int
    limit: int
    total_pages: int
    date_start: datetime
    date_end: datetime

    def to_dict(self) -> dict[str, Any]:
        """Success body of the journal endpoint"""
        return {
            "success": True,
            "data": [entry.to_dict() for entry in self.entries],
            "totaux": self.totals.to_dict(),
            "meta": {
                "total": self.total,
                "page": self.page,
                "limit": self.limit,
                "totalPages": self.total_pages,
                "dateDebut": to_iso_z(self.date_start),
                "dateFin": to_iso_z(self.date_end),
            },
        }


async def collect_entries(
    source: IJournalSource,
    rows: list[CategorySource] | tuple[CategorySource, ...],
    start: datetime,
    end: datetime,
) -> list[LedgerEntry]:
    """Fetch the given categories concurrently and map them to entries

    All fetches are awaited together; the first failure cancels the
    others and propagates.
    Entries come back in table order, each batch in store order.
    """
    batches = await gather_or_cancel(
        *(row.fetch(source, start, end) for row in rows)
    )

    entries: list[LedgerEntry] = []
    for row, records in zip(rows, batches):
        entries.extend(build_entries(row.build, records))
    return entries


class LedgerAggregator:
    """Unified accounting journal

    Args:
        source: journal finder (SQLite store or an in-memory fake)

    Usage:
    ```python
    aggregator = LedgerAggregator(JournalStore(db))
    result = await aggregator.get_ledger(JournalQuery.from_params(page=2))
    ```
    """

    def __init__(self, source: IJournalSource):
        self.source = source

    async def get_ledger(self, query: JournalQuery) -> JournalResult:
        """Build one journal page

        Args:
            query: resolved filters

        Returns:
            JournalResult (page slice, totals, pagination meta)
        """
        rows = [
            row for row in CATEGORY_SOURCES
            if query.includes(row.category, row.journal_type)
        ]

        entries = await collect_entries(
            self.source, rows, query.date_start, query.date_end
        )

        filtered = [e for e in entries if query.matches_search(e)]

        # sorted() is stable: equal dates keep table order
        filtered = sorted(filtered, key=lambda e: e.date, reverse=True)

        totals = JournalTotals.from_entries(filtered)

        total = len(filtered)
        total_pages = max(1, math.ceil(total / query.limit))
        offset = (query.page - 1) * query.limit
        page_entries = filtered[offset:offset + query.limit]

        logger.debug(
            f"Journal built: categories={len(rows)} entries={len(entries)} "
            f"filtered={total} page={query.page}/{total_pages}"
        )

        return JournalResult(
            entries=page_entries,
            totals=totals,
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=total_pages,
            date_start=query.date_start,
            date_end=query.date_end,
        )
