"""
Journal category table

One row per journal category: its fixed type, the finder call (with its
status predicate) and the entry builder. The aggregator iterates this
table instead of branching per category.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from adapters.interfaces import IJournalSource
from core.journal.entry_builder import (
    build_contribution_entry,
    build_disbursement_entry,
    build_dues_entry,
    build_payout_entry,
    build_repayment_entry,
    build_replenishment_entry,
    build_sale_entry,
)
from core.journal.types import CATEGORY_TYPES, JournalCategory, JournalType, LedgerEntry
from core.types import (
    ContributionStatus,
    CotisationStatus,
    CreditTransactionType,
    StockMovementType,
    TontineCycleStatus,
)

Fetch = Callable[[IJournalSource, datetime, datetime], Awaitable[list[Any]]]


@dataclass(frozen=True)
class CategorySource:
    """How one journal category is fetched and mapped"""

    category: JournalCategory
    journal_type: JournalType
    fetch: Fetch
    build: Callable[[Any], LedgerEntry | None]


def _row(category: JournalCategory, fetch: Fetch, build: Callable[[Any], LedgerEntry | None]) -> CategorySource:
    return CategorySource(
        category=category,
        journal_type=CATEGORY_TYPES[category],
        fetch=fetch,
        build=build,
    )


CATEGORY_SOURCES: tuple[CategorySource, ...] = (
    _row(
        JournalCategory.SALE,
        lambda source, start, end: source.find_food_credit_sales(start, end),
        build_sale_entry,
    ),
    _row(
        JournalCategory.DUES,
        lambda source, start, end: source.find_cotisations(
            start, end, status=CotisationStatus.PAID
        ),
        build_dues_entry,
    ),
    _row(
        JournalCategory.TONTINE_CONTRIBUTION,
        lambda source, start, end: source.find_tontine_contributions(
            start, end, status=ContributionStatus.PAID
        ),
        build_contribution_entry,
    ),
    _row(
        JournalCategory.CREDIT_REPAYMENT,
        lambda source, start, end: source.find_credit_transactions(
            start, end, kind=CreditTransactionType.REPAYMENT
        ),
        build_repayment_entry,
    ),
    _row(
        JournalCategory.CREDIT_DISBURSEMENT,
        lambda source, start, end: source.find_credit_transactions(
            start, end, kind=CreditTransactionType.DISBURSEMENT
        ),
        build_disbursement_entry,
    ),
    _row(
        JournalCategory.STOCK_REPLENISHMENT,
        lambda source, start, end: source.find_stock_movements(
            start, end, kind=StockMovementType.ENTRY
        ),
        build_replenishment_entry,
    ),
    _row(
        JournalCategory.TONTINE_PAYOUT,
        lambda source, start, end: source.find_tontine_cycles(
            start, end, status=TontineCycleStatus.COMPLETE
        ),
        build_payout_entry,
    ),
)
