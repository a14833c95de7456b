"""
Journal service

Resolves request parameters and runs the journal core against the
injected finder.
"""

import logging
from datetime import datetime
from typing import Any

from adapters.interfaces import IJournalSource
from core.journal import (
    FinancialStatementsBuilder,
    FinancialSummaryBuilder,
    JournalQuery,
    LedgerAggregator,
)

logger = logging.getLogger(__name__)


class JournalService:
    """Journal service

    Args:
        source: journal finder (JournalStore in production)
    """

    def __init__(self, source: IJournalSource):
        self.source = source

    async def get_journal(
        self,
        page: int | None = None,
        limit: int | None = None,
        type_filter: str | None = None,
        category: str | None = None,
        search: str | None = None,
        date_start: str | None = None,
        date_end: str | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Journal page body

        Raises:
            JournalQueryError: invalid date parameter
        """
        query = JournalQuery.from_params(
            page=page,
            limit=limit,
            type_filter=type_filter,
            category=category,
            search=search,
            date_start=date_start,
            date_end=date_end,
            now=now,
        )

        result = await LedgerAggregator(self.source).get_ledger(query)
        return result.to_dict()

    async def get_summary(
        self,
        period: int | None = None,
        now: datetime | None = None,
    ) -> dict[str, Any]:
        """Financial summary body"""
        summary = await FinancialSummaryBuilder(self.source).build(period, now=now)
        return {"success": True, "data": summary.to_dict()}

    async def get_statements(self, now: datetime | None = None) -> dict[str, Any]:
        """Financial statements body (balance sheet, income statement, ratios)"""
        statements = await FinancialStatementsBuilder(self.source).build(now=now)
        return {"success": True, "data": statements.to_dict()}
