"""
Mock journal source

In-memory IJournalSource / ISnapshotSource for tests.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from core.domain.records import (
    CotisationRecord,
    CreditTransactionRecord,
    FoodCreditSaleRecord,
    OutstandingTotal,
    StockMovementRecord,
    StockValuation,
    TontineContributionRecord,
    TontineCycleRecord,
)
from core.types import (
    ContributionStatus,
    CotisationStatus,
    CreditTransactionType,
    StockMovementType,
    TontineCycleStatus,
)
from core.utils.timezone import ensure_utc

_EMPTY = OutstandingTotal(amount=Decimal("0"), count=0)


class StoreUnavailableError(RuntimeError):
    """Raised by a finder listed in fail_on"""

    pass


@dataclass
class FinderCall:
    """One recorded finder call"""

    method: str
    start: datetime | None = None
    end: datetime | None = None
    predicate: Any = None


def _in_range(value: datetime | None, start: datetime, end: datetime) -> bool:
    # undated records are handed back so the caller's skip rule is exercised
    if value is None:
        return True
    return ensure_utc(start) <= ensure_utc(value) <= ensure_utc(end)


class InMemoryJournalSource:
    """Mock journal source

    Holds records per finder together with the status or kind they are
    filed under, and records every call for assertions.

    Usage:
    ```python
    source = InMemoryJournalSource()
    source.add_cotisation(record, status=CotisationStatus.PAID)

    result = await LedgerAggregator(source).get_ledger(query)
    assert source.called("find_cotisations")
    ```
    """

    def __init__(self, fail_on: set[str] | None = None):
        """
        Args:
            fail_on: finder names that raise StoreUnavailableError
        """
        self.fail_on: set[str] = set(fail_on or ())
        self.calls: list[FinderCall] = []

        self.sales: list[FoodCreditSaleRecord] = []
        self.cotisations: list[tuple[CotisationStatus, CotisationRecord]] = []
        self.contributions: list[tuple[ContributionStatus, TontineContributionRecord]] = []
        self.credit_transactions: list[CreditTransactionRecord] = []
        self.stock_movements: list[tuple[StockMovementType, StockMovementRecord]] = []
        self.cycles: list[tuple[TontineCycleStatus, TontineCycleRecord]] = []

        self.stock_valuation = StockValuation(value=Decimal("0"), product_count=0)
        self.active_members = 0
        self.active_tontines = 0
        self.open_credits = 0

        self.pending_cotisations = _EMPTY
        self.paid_cotisations = _EMPTY
        self.food_credit_balances = _EMPTY
        self.food_credit_ceilings = _EMPTY
        self.unrepaid_credits = _EMPTY
        self.open_tontine_pots = _EMPTY

    # =========================================================================
    # Setup
    # =========================================================================

    def add_sale(self, record: FoodCreditSaleRecord) -> None:
        self.sales.append(record)

    def add_cotisation(
        self,
        record: CotisationRecord,
        status: CotisationStatus = CotisationStatus.PAID,
    ) -> None:
        self.cotisations.append((status, record))

    def add_contribution(
        self,
        record: TontineContributionRecord,
        status: ContributionStatus = ContributionStatus.PAID,
    ) -> None:
        self.contributions.append((status, record))

    def add_credit_transaction(self, record: CreditTransactionRecord) -> None:
        self.credit_transactions.append(record)

    def add_stock_movement(
        self,
        record: StockMovementRecord,
        kind: StockMovementType = StockMovementType.ENTRY,
    ) -> None:
        self.stock_movements.append((kind, record))

    def add_cycle(
        self,
        record: TontineCycleRecord,
        status: TontineCycleStatus = TontineCycleStatus.COMPLETE,
    ) -> None:
        self.cycles.append((status, record))

    # =========================================================================
    # Call log
    # =========================================================================

    def _record(
        self,
        method: str,
        start: datetime | None = None,
        end: datetime | None = None,
        predicate: Any = None,
    ) -> None:
        self.calls.append(FinderCall(method=method, start=start, end=end, predicate=predicate))
        if method in self.fail_on:
            raise StoreUnavailableError(f"{method} failed")

    def called(self, method: str) -> bool:
        return any(call.method == method for call in self.calls)

    def reset_calls(self) -> None:
        self.calls.clear()

    # =========================================================================
    # IJournalSource
    # =========================================================================

    async def find_food_credit_sales(
        self,
        start: datetime,
        end: datetime,
    ) -> list[FoodCreditSaleRecord]:
        self._record("find_food_credit_sales", start, end)
        return [r for r in self.sales if _in_range(r.created_at, start, end)]

    async def find_cotisations(
        self,
        start: datetime,
        end: datetime,
        status: CotisationStatus,
    ) -> list[CotisationRecord]:
        self._record("find_cotisations", start, end, status)
        return [
            r for s, r in self.cotisations
            if s == status and _in_range(r.paid_at, start, end)
        ]

    async def find_tontine_contributions(
        self,
        start: datetime,
        end: datetime,
        status: ContributionStatus,
    ) -> list[TontineContributionRecord]:
        self._record("find_tontine_contributions", start, end, status)
        return [
            r for s, r in self.contributions
            if s == status and _in_range(r.paid_at, start, end)
        ]

    async def find_credit_transactions(
        self,
        start: datetime,
        end: datetime,
        kind: CreditTransactionType,
    ) -> list[CreditTransactionRecord]:
        self._record("find_credit_transactions", start, end, kind)
        return [
            r for r in self.credit_transactions
            if r.kind == kind and _in_range(r.created_at, start, end)
        ]

    async def find_stock_movements(
        self,
        start: datetime,
        end: datetime,
        kind: StockMovementType,
    ) -> list[StockMovementRecord]:
        self._record("find_stock_movements", start, end, kind)
        return [
            r for k, r in self.stock_movements
            if k == kind and _in_range(r.moved_at, start, end)
        ]

    async def find_tontine_cycles(
        self,
        start: datetime,
        end: datetime,
        status: TontineCycleStatus,
    ) -> list[TontineCycleRecord]:
        self._record("find_tontine_cycles", start, end, status)
        return [
            r for s, r in self.cycles
            if s == status and _in_range(r.closed_at, start, end)
        ]

    # =========================================================================
    # ISnapshotSource
    # =========================================================================

    async def get_stock_valuation(self) -> StockValuation:
        self._record("get_stock_valuation")
        return self.stock_valuation

    async def count_active_members(self) -> int:
        self._record("count_active_members")
        return self.active_members

    async def count_active_tontines(self) -> int:
        self._record("count_active_tontines")
        return self.active_tontines

    async def count_open_credits(self) -> int:
        self._record("count_open_credits")
        return self.open_credits

    async def sum_pending_cotisations(self) -> OutstandingTotal:
        self._record("sum_pending_cotisations")
        return self.pending_cotisations

    async def sum_paid_cotisations(self) -> OutstandingTotal:
        self._record("sum_paid_cotisations")
        return self.paid_cotisations

    async def sum_food_credit_balances(self) -> OutstandingTotal:
        self._record("sum_food_credit_balances")
        return self.food_credit_balances

    async def sum_food_credit_ceilings(self) -> OutstandingTotal:
        self._record("sum_food_credit_ceilings")
        return self.food_credit_ceilings

    async def sum_unrepaid_credits(self) -> OutstandingTotal:
        self._record("sum_unrepaid_credits")
        return self.unrepaid_credits

    async def sum_open_tontine_pots(self) -> OutstandingTotal:
        self._record("sum_open_tontine_pots")
        return self.open_tontine_pots
