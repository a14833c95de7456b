"""
BackOfficeWriter - minimal write access to the back-office tables

The back office owns these tables; this writer only exists to seed the
demo database and to build integration fixtures. Each method inserts one
row and returns its id. Callers commit (or use db.transaction()).
"""

import logging
from datetime import datetime
from decimal import Decimal

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.types import (
    ContributionStatus,
    CotisationStatus,
    CreditStatus,
    CreditTransactionType,
    FoodCreditStatus,
    MemberState,
    StockMovementType,
    TontineCycleStatus,
    TontineStatus,
)
from core.utils.timezone import to_db_ts

logger = logging.getLogger(__name__)


def _ts(value: datetime | None) -> str | None:
    return to_db_ts(value) if value is not None else None


class BackOfficeWriter:
    """Row inserts for the tables the journal reads

    Args:
        db: writable SQLiteAdapter
    """

    def __init__(self, db: SQLiteAdapter):
        self.db = db

    async def _insert(self, sql: str, parameters: tuple) -> int:
        cursor = await self.db.execute(sql, parameters)
        row_id = cursor.lastrowid
        await cursor.close()
        return row_id

    async def add_member(
        self,
        first_name: str,
        last_name: str,
        state: MemberState = MemberState.ACTIVE,
    ) -> int:
        return await self._insert(
            "INSERT INTO member (first_name, last_name, state) VALUES (?, ?, ?)",
            (first_name, last_name, state.value),
        )

    async def add_client(self, first_name: str, last_name: str) -> int:
        return await self._insert(
            "INSERT INTO client (first_name, last_name) VALUES (?, ?)",
            (first_name, last_name),
        )

    async def add_product(self, name: str, unit_price: Decimal, stock: int = 0) -> int:
        return await self._insert(
            "INSERT INTO product (name, unit_price, stock) VALUES (?, ?, ?)",
            (name, str(unit_price), stock),
        )

    async def add_food_credit(
        self,
        member_id: int | None = None,
        client_id: int | None = None,
        ceiling: Decimal = Decimal("0"),
        remaining: Decimal | None = None,
        status: FoodCreditStatus = FoodCreditStatus.ACTIVE,
    ) -> int:
        """remaining defaults to the full ceiling"""
        if remaining is None:
            remaining = ceiling
        return await self._insert(
            """
            INSERT INTO food_credit (member_id, client_id, ceiling, remaining, status)
            VALUES (?, ?, ?, ?, ?)
            """,
            (member_id, client_id, str(ceiling), str(remaining), status.value),
        )

    async def add_sale(
        self,
        product_id: int,
        quantity: int,
        unit_price: Decimal,
        created_at: datetime,
        food_credit_id: int | None = None,
    ) -> int:
        return await self._insert(
            """
            INSERT INTO food_credit_sale (food_credit_id, product_id, quantity, unit_price, created_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            (food_credit_id, product_id, quantity, str(unit_price), to_db_ts(created_at)),
        )

    async def add_cotisation(
        self,
        amount: Decimal,
        period: str,
        status: CotisationStatus,
        paid_at: datetime | None = None,
        member_id: int | None = None,
        client_id: int | None = None,
    ) -> int:
        return await self._insert(
            """
            INSERT INTO cotisation (member_id, client_id, amount, period, status, paid_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (member_id, client_id, str(amount), period, status.value, _ts(paid_at)),
        )

    async def add_tontine(self, name: str, status: TontineStatus = TontineStatus.ACTIVE) -> int:
        return await self._insert(
            "INSERT INTO tontine (name, status) VALUES (?, ?)",
            (name, status.value),
        )

    async def add_cycle(
        self,
        tontine_id: int,
        cycle_number: int,
        pot_amount: Decimal = Decimal("0"),
        status: TontineCycleStatus = TontineCycleStatus.IN_PROGRESS,
        closed_at: datetime | None = None,
        beneficiary_member_id: int | None = None,
        beneficiary_client_id: int | None = None,
    ) -> int:
        return await self._insert(
            """
            INSERT INTO tontine_cycle (
                tontine_id, cycle_number, pot_amount, status, closed_at,
                beneficiary_member_id, beneficiary_client_id
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                tontine_id,
                cycle_number,
                str(pot_amount),
                status.value,
                _ts(closed_at),
                beneficiary_member_id,
                beneficiary_client_id,
            ),
        )

    async def add_contribution(
        self,
        cycle_id: int,
        amount: Decimal,
        status: ContributionStatus,
        paid_at: datetime | None = None,
    ) -> int:
        return await self._insert(
            "INSERT INTO tontine_contribution (cycle_id, amount, status, paid_at) VALUES (?, ?, ?, ?)",
            (cycle_id, str(amount), status.value, _ts(paid_at)),
        )

    async def add_credit(
        self,
        amount: Decimal,
        status: CreditStatus = CreditStatus.APPROVED,
        member_id: int | None = None,
        client_id: int | None = None,
        remaining: Decimal | None = None,
    ) -> int:
        """remaining defaults to the granted amount"""
        if remaining is None:
            remaining = amount
        return await self._insert(
            """
            INSERT INTO credit (member_id, client_id, amount, remaining, status)
            VALUES (?, ?, ?, ?, ?)
            """,
            (member_id, client_id, str(amount), str(remaining), status.value),
        )

    async def add_credit_transaction(
        self,
        credit_id: int,
        kind: CreditTransactionType,
        amount: Decimal,
        created_at: datetime,
    ) -> int:
        return await self._insert(
            "INSERT INTO credit_transaction (credit_id, type, amount, created_at) VALUES (?, ?, ?, ?)",
            (credit_id, kind.value, str(amount), to_db_ts(created_at)),
        )

    async def add_stock_movement(
        self,
        product_id: int,
        kind: StockMovementType,
        quantity: int,
        reference: str,
        moved_at: datetime,
        reason: str | None = None,
    ) -> int:
        return await self._insert(
            """
            INSERT INTO stock_movement (product_id, type, quantity, reason, reference, moved_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (product_id, kind.value, quantity, reason, reference, to_db_ts(moved_at)),
        )
