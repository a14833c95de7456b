"""
JournalStore - journal finder over the back-office database

Read-only SQL implementation of IJournalSource and ISnapshotSource.
Each finder is one query with its joins (product, member, client,
tontine) so the aggregator never issues per-record lookups.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Any

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.domain.records import (
    CotisationRecord,
    CreditTransactionRecord,
    FoodCreditSaleRecord,
    OutstandingTotal,
    StockMovementRecord,
    StockValuation,
    TontineContributionRecord,
    TontineCycleRecord,
    resolve_beneficiary,
)
from core.types import (
    ALLOCATED_FOOD_CREDIT_STATUSES,
    OPEN_CREDIT_STATUSES,
    UNREPAID_CREDIT_STATUSES,
    ContributionStatus,
    CotisationStatus,
    CreditTransactionType,
    FoodCreditStatus,
    MemberState,
    StockMovementType,
    TontineCycleStatus,
    TontineStatus,
)
from core.utils.timezone import from_db_ts, to_db_ts

logger = logging.getLogger(__name__)


def _name(first: str | None, last: str | None) -> tuple[str, str] | None:
    if first is None:
        return None
    return (first, last or "")


def _dec(value: Any) -> Decimal:
    return Decimal(str(value))


# Canonical UTC text (millisecond precision). Rows written as
# "YYYY-MM-DD HH:MM:SS" or with a UTC offset compare correctly once
# both sides go through it; NULL and unparseable values never match.
_CANONICAL_TS = "strftime('%Y-%m-%dT%H:%M:%fZ', {})"


def _between(column: str) -> str:
    """Inclusive date range predicate on a timestamp column (two parameters)"""
    return (
        f"{_CANONICAL_TS.format(column)} "
        f"BETWEEN {_CANONICAL_TS.format('?')} AND {_CANONICAL_TS.format('?')}"
    )


class JournalStore:
    """Journal finder (SQLite)

    Args:
        db: SQLiteAdapter instance (a read-only connection is enough)

    Usage:
    ```python
    async with SQLiteAdapter(db_path, readonly=True) as db:
        store = JournalStore(db)
        sales = await store.find_food_credit_sales(start, end)
    ```
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def find_food_credit_sales(
        self,
        start: datetime,
        end: datetime,
    ) -> list[FoodCreditSaleRecord]:
        rows = await self.db.fetchall(
            f"""
            SELECT s.id, s.created_at, s.quantity, s.unit_price, p.name,
                   m.first_name, m.last_name, c.first_name, c.last_name
            FROM food_credit_sale s
            JOIN product p ON p.id = s.product_id
            LEFT JOIN food_credit fc ON fc.id = s.food_credit_id
            LEFT JOIN member m ON m.id = fc.member_id
            LEFT JOIN client c ON c.id = fc.client_id
            WHERE {_between('s.created_at')}
            ORDER BY s.created_at DESC, s.id
            """,
            (to_db_ts(start), to_db_ts(end)),
        )

        return [
            FoodCreditSaleRecord(
                id=row[0],
                created_at=from_db_ts(row[1]),
                quantity=row[2],
                unit_price=_dec(row[3]),
                product_name=row[4],
                beneficiary=resolve_beneficiary(_name(row[5], row[6]), _name(row[7], row[8])),
            )
            for row in rows
        ]

    async def find_cotisations(
        self,
        start: datetime,
        end: datetime,
        status: CotisationStatus,
    ) -> list[CotisationRecord]:
        rows = await self.db.fetchall(
            f"""
            SELECT co.id, co.amount, co.paid_at, co.period,
                   m.first_name, m.last_name, c.first_name, c.last_name
            FROM cotisation co
            LEFT JOIN member m ON m.id = co.member_id
            LEFT JOIN client c ON c.id = co.client_id
            WHERE co.status = ?
              AND {_between('co.paid_at')}
            ORDER BY co.paid_at DESC, co.id
            """,
            (CotisationStatus(status).value, to_db_ts(start), to_db_ts(end)),
        )

        return [
            CotisationRecord(
                id=row[0],
                amount=_dec(row[1]),
                paid_at=from_db_ts(row[2]),
                period=row[3],
                beneficiary=resolve_beneficiary(_name(row[4], row[5]), _name(row[6], row[7])),
            )
            for row in rows
        ]

    async def find_tontine_contributions(
        self,
        start: datetime,
        end: datetime,
        status: ContributionStatus,
    ) -> list[TontineContributionRecord]:
        rows = await self.db.fetchall(
            f"""
            SELECT tc.id, tc.amount, tc.paid_at, t.name
            FROM tontine_contribution tc
            JOIN tontine_cycle cy ON cy.id = tc.cycle_id
            JOIN tontine t ON t.id = cy.tontine_id
            WHERE tc.status = ?
              AND {_between('tc.paid_at')}
            ORDER BY tc.paid_at DESC, tc.id
            """,
            (ContributionStatus(status).value, to_db_ts(start), to_db_ts(end)),
        )

        return [
            TontineContributionRecord(
                id=row[0],
                amount=_dec(row[1]),
                paid_at=from_db_ts(row[2]),
                tontine_name=row[3],
            )
            for row in rows
        ]

    async def find_credit_transactions(
        self,
        start: datetime,
        end: datetime,
        kind: CreditTransactionType,
    ) -> list[CreditTransactionRecord]:
        kind = CreditTransactionType(kind)
        rows = await self.db.fetchall(
            f"""
            SELECT ct.id, ct.amount, ct.created_at, ct.credit_id,
                   m.first_name, m.last_name, c.first_name, c.last_name
            FROM credit_transaction ct
            JOIN credit cr ON cr.id = ct.credit_id
            LEFT JOIN member m ON m.id = cr.member_id
            LEFT JOIN client c ON c.id = cr.client_id
            WHERE ct.type = ?
              AND {_between('ct.created_at')}
            ORDER BY ct.created_at DESC, ct.id
            """,
            (kind.value, to_db_ts(start), to_db_ts(end)),
        )

        return [
            CreditTransactionRecord(
                id=row[0],
                amount=_dec(row[1]),
                created_at=from_db_ts(row[2]),
                credit_id=row[3],
                kind=kind,
                beneficiary=resolve_beneficiary(_name(row[4], row[5]), _name(row[6], row[7])),
            )
            for row in rows
        ]

    async def find_stock_movements(
        self,
        start: datetime,
        end: datetime,
        kind: StockMovementType,
    ) -> list[StockMovementRecord]:
        rows = await self.db.fetchall(
            f"""
            SELECT sm.id, sm.quantity, sm.moved_at, sm.reference, sm.reason,
                   p.name, p.unit_price
            FROM stock_movement sm
            JOIN product p ON p.id = sm.product_id
            WHERE sm.type = ?
              AND {_between('sm.moved_at')}
            ORDER BY sm.moved_at DESC, sm.id
            """,
            (StockMovementType(kind).value, to_db_ts(start), to_db_ts(end)),
        )

        return [
            StockMovementRecord(
                id=row[0],
                quantity=row[1],
                moved_at=from_db_ts(row[2]),
                reference=row[3],
                reason=row[4],
                product_name=row[5],
                product_unit_price=_dec(row[6]),
            )
            for row in rows
        ]

    async def find_tontine_cycles(
        self,
        start: datetime,
        end: datetime,
        status: TontineCycleStatus,
    ) -> list[TontineCycleRecord]:
        rows = await self.db.fetchall(
            f"""
            SELECT cy.id, cy.pot_amount, cy.cycle_number, cy.closed_at, t.name,
                   m.first_name, m.last_name, c.first_name, c.last_name
            FROM tontine_cycle cy
            JOIN tontine t ON t.id = cy.tontine_id
            LEFT JOIN member m ON m.id = cy.beneficiary_member_id
            LEFT JOIN client c ON c.id = cy.beneficiary_client_id
            WHERE cy.status = ?
              AND {_between('cy.closed_at')}
            ORDER BY cy.closed_at DESC, cy.id
            """,
            (TontineCycleStatus(status).value, to_db_ts(start), to_db_ts(end)),
        )

        return [
            TontineCycleRecord(
                id=row[0],
                pot_amount=_dec(row[1]),
                cycle_number=row[2],
                closed_at=from_db_ts(row[3]),
                tontine_name=row[4],
                beneficiary=resolve_beneficiary(_name(row[5], row[6]), _name(row[7], row[8])),
            )
            for row in rows
        ]

    # =========================================================================
    # Snapshot
    # =========================================================================

    async def get_stock_valuation(self) -> StockValuation:
        """Sum of stock x unit price over all products

        Computed in Python so TEXT prices keep their exact value.
        """
        rows = await self.db.fetchall("SELECT stock, unit_price FROM product")

        value = sum((_dec(price) * stock for stock, price in rows), Decimal("0"))
        return StockValuation(value=value, product_count=len(rows))

    async def count_active_members(self) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM member WHERE state = ?",
            (MemberState.ACTIVE.value,),
        )
        return row[0] if row else 0

    async def count_active_tontines(self) -> int:
        row = await self.db.fetchone(
            "SELECT COUNT(*) FROM tontine WHERE status = ?",
            (TontineStatus.ACTIVE.value,),
        )
        return row[0] if row else 0

    async def count_open_credits(self) -> int:
        placeholders = ", ".join("?" for _ in OPEN_CREDIT_STATUSES)
        row = await self.db.fetchone(
            f"SELECT COUNT(*) FROM credit WHERE status IN ({placeholders})",
            tuple(status.value for status in OPEN_CREDIT_STATUSES),
        )
        return row[0] if row else 0

    # =========================================================================
    # Balance sheet
    # =========================================================================

    async def _outstanding(
        self,
        table: str,
        column: str,
        statuses: tuple[str, ...],
    ) -> OutstandingTotal:
        """Sum one TEXT amount column over the rows in the given statuses"""
        placeholders = ", ".join("?" for _ in statuses)
        rows = await self.db.fetchall(
            f"SELECT {column} FROM {table} WHERE status IN ({placeholders})",
            statuses,
        )
        amount = sum((_dec(row[0]) for row in rows), Decimal("0"))
        return OutstandingTotal(amount=amount, count=len(rows))

    async def sum_pending_cotisations(self) -> OutstandingTotal:
        return await self._outstanding(
            "cotisation", "amount", (CotisationStatus.PENDING.value,)
        )

    async def sum_paid_cotisations(self) -> OutstandingTotal:
        return await self._outstanding(
            "cotisation", "amount", (CotisationStatus.PAID.value,)
        )

    async def sum_food_credit_balances(self) -> OutstandingTotal:
        return await self._outstanding(
            "food_credit", "remaining", (FoodCreditStatus.ACTIVE.value,)
        )

    async def sum_food_credit_ceilings(self) -> OutstandingTotal:
        return await self._outstanding(
            "food_credit",
            "ceiling",
            tuple(status.value for status in ALLOCATED_FOOD_CREDIT_STATUSES),
        )

    async def sum_unrepaid_credits(self) -> OutstandingTotal:
        return await self._outstanding(
            "credit",
            "remaining",
            tuple(status.value for status in UNREPAID_CREDIT_STATUSES),
        )

    async def sum_open_tontine_pots(self) -> OutstandingTotal:
        return await self._outstanding(
            "tontine_cycle", "pot_amount", (TontineCycleStatus.IN_PROGRESS.value,)
        )
