"""
Adapter interface definitions

Protocol based so the store can be injected and swapped for a fake.
Every implementation must follow these Protocols.
"""

from datetime import datetime
from typing import Protocol, runtime_checkable

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


@runtime_checkable
class IJournalSource(Protocol):
    """Journal finder interface

    Read-only access to the six record kinds the journal is built from.
    Date bounds are inclusive on both ends and compared against the
    record's event date (payment, movement, closure or creation date).
    """

    async def find_food_credit_sales(
        self,
        start: datetime,
        end: datetime,
    ) -> list[FoodCreditSaleRecord]:
        """Food credit sales created within [start, end]"""
        ...

    async def find_cotisations(
        self,
        start: datetime,
        end: datetime,
        status: CotisationStatus,
    ) -> list[CotisationRecord]:
        """Dues with the given status paid within [start, end]"""
        ...

    async def find_tontine_contributions(
        self,
        start: datetime,
        end: datetime,
        status: ContributionStatus,
    ) -> list[TontineContributionRecord]:
        """Tontine contributions with the given status paid within [start, end]"""
        ...

    async def find_credit_transactions(
        self,
        start: datetime,
        end: datetime,
        kind: CreditTransactionType,
    ) -> list[CreditTransactionRecord]:
        """Credit transactions of the given kind created within [start, end]"""
        ...

    async def find_stock_movements(
        self,
        start: datetime,
        end: datetime,
        kind: StockMovementType,
    ) -> list[StockMovementRecord]:
        """Stock movements of the given kind dated within [start, end]"""
        ...

    async def find_tontine_cycles(
        self,
        start: datetime,
        end: datetime,
        status: TontineCycleStatus,
    ) -> list[TontineCycleRecord]:
        """Tontine cycles with the given status closed within [start, end]"""
        ...


@runtime_checkable
class ISnapshotSource(Protocol):
    """Point-in-time counters and balances (summary, financial statements)"""

    async def get_stock_valuation(self) -> StockValuation:
        """Sum of stock x unit price over all products"""
        ...

    async def count_active_members(self) -> int:
        ...

    async def count_active_tontines(self) -> int:
        ...

    async def count_open_credits(self) -> int:
        """Credits still pending, approved or partially repaid"""
        ...

    # Balance sheet lines (current state, no date window)

    async def sum_pending_cotisations(self) -> OutstandingTotal:
        """Dues still awaiting payment (receivables)"""
        ...

    async def sum_paid_cotisations(self) -> OutstandingTotal:
        """Every dues payment ever collected"""
        ...

    async def sum_food_credit_balances(self) -> OutstandingTotal:
        """Remaining balance of the active food credits"""
        ...

    async def sum_food_credit_ceilings(self) -> OutstandingTotal:
        """Ceilings of the active and exhausted food credits"""
        ...

    async def sum_unrepaid_credits(self) -> OutstandingTotal:
        """Remaining balance of approved or partially repaid credits"""
        ...

    async def sum_open_tontine_pots(self) -> OutstandingTotal:
        """Pots of the tontine cycles still in progress"""
        ...
