"""
JournalStore integration tests

Real SQLite database seeded through BackOfficeWriter; the journal and
the summary are built end to end over it.
"""

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.interfaces import IJournalSource, ISnapshotSource
from core.domain.records import (
    ClientBeneficiary,
    MemberBeneficiary,
    OutstandingTotal,
    UnknownBeneficiary,
)
from core.journal import (
    FinancialStatementsBuilder,
    FinancialSummaryBuilder,
    JournalCategory,
    JournalQuery,
    LedgerAggregator,
)
from core.storage.backoffice_writer import BackOfficeWriter
from core.storage.journal_store import JournalStore
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

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
DAY = timedelta(days=1)
START = NOW - DAY * 30
END = datetime(2026, 10, 19, 23, 59, 59, 999000, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def seeded(db: SQLiteAdapter) -> SQLiteAdapter:
    """One or two rows per source table, some outside the window"""
    w = BackOfficeWriter(db)

    awa = await w.add_member("Awa", "Diop")
    await w.add_member("Fatou", "Ndiaye", state=MemberState.INACTIVE)
    khady = await w.add_client("Khady", "Fall")

    rice = await w.add_product("Riz 25kg", Decimal("15000"), stock=4)
    sugar = await w.add_product("Sucre 1kg", Decimal("750.25"), stock=10)

    fc_awa = await w.add_food_credit(member_id=awa)
    fc_khady = await w.add_food_credit(client_id=khady)
    await w.add_sale(sugar, 3, Decimal("750.25"), NOW - DAY, food_credit_id=fc_awa)
    await w.add_sale(rice, 1, Decimal("15000"), NOW - DAY * 2, food_credit_id=fc_khady)
    await w.add_sale(rice, 1, Decimal("15000"), NOW - DAY * 45, food_credit_id=fc_khady)

    await w.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PAID, NOW - DAY * 3, member_id=awa)
    await w.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PENDING, None, member_id=awa)
    await w.add_cotisation(Decimal("2500"), "ANNUELLE", CotisationStatus.LATE, NOW - DAY * 3, client_id=khady)

    tontine = await w.add_tontine("Tontine du marché")
    await w.add_tontine("Ancienne tontine", status=TontineStatus.FINISHED)
    closed = await w.add_cycle(
        tontine, 1, Decimal("40000"), TontineCycleStatus.COMPLETE, NOW - DAY * 4,
        beneficiary_member_id=awa,
    )
    running = await w.add_cycle(tontine, 2)
    await w.add_contribution(closed, Decimal("20000"), ContributionStatus.PAID, NOW - DAY * 10)
    await w.add_contribution(running, Decimal("20000"), ContributionStatus.PENDING)

    loan = await w.add_credit(Decimal("100000"), CreditStatus.PARTIALLY_REPAID, member_id=awa)
    await w.add_credit(Decimal("10000"), CreditStatus.FULLY_REPAID, client_id=khady)
    await w.add_credit_transaction(loan, CreditTransactionType.DISBURSEMENT, Decimal("100000"), NOW - DAY * 20)
    await w.add_credit_transaction(loan, CreditTransactionType.REPAYMENT, Decimal("25000"), NOW - DAY * 5)

    await w.add_stock_movement(rice, StockMovementType.ENTRY, 2, "BL-1", NOW - DAY * 6, reason="Livraison")
    await w.add_stock_movement(sugar, StockMovementType.EXIT, 1, "SO-1", NOW - DAY * 6)

    await db.commit()
    return db


class TestJournalStoreFinders:
    """Finder queries"""

    @pytest.mark.asyncio
    async def test_implements_protocols(self, db: SQLiteAdapter) -> None:
        store = JournalStore(db)

        assert isinstance(store, IJournalSource)
        assert isinstance(store, ISnapshotSource)

    @pytest.mark.asyncio
    async def test_sales_window_and_beneficiary(self, seeded: SQLiteAdapter) -> None:
        sales = await JournalStore(seeded).find_food_credit_sales(START, END)

        assert len(sales) == 2
        by_product = {s.product_name: s for s in sales}
        assert by_product["Sucre 1kg"].beneficiary == MemberBeneficiary("Awa", "Diop")
        assert by_product["Riz 25kg"].beneficiary == ClientBeneficiary("Khady", "Fall")
        assert by_product["Sucre 1kg"].unit_price == Decimal("750.25")
        assert by_product["Sucre 1kg"].created_at == NOW - DAY

    @pytest.mark.asyncio
    async def test_cotisations_by_status(self, seeded: SQLiteAdapter) -> None:
        store = JournalStore(seeded)

        paid = await store.find_cotisations(START, END, status=CotisationStatus.PAID)
        late = await store.find_cotisations(START, END, status=CotisationStatus.LATE)
        pending = await store.find_cotisations(START, END, status=CotisationStatus.PENDING)

        assert [c.amount for c in paid] == [Decimal("5000")]
        assert isinstance(late[0].beneficiary, ClientBeneficiary)
        # no payment date, never in a date window
        assert pending == []

    @pytest.mark.asyncio
    async def test_contributions(self, seeded: SQLiteAdapter) -> None:
        rows = await JournalStore(seeded).find_tontine_contributions(
            START, END, status=ContributionStatus.PAID
        )

        assert len(rows) == 1
        assert rows[0].tontine_name == "Tontine du marché"

    @pytest.mark.asyncio
    async def test_credit_transactions_by_kind(self, seeded: SQLiteAdapter) -> None:
        store = JournalStore(seeded)

        repayments = await store.find_credit_transactions(START, END, kind=CreditTransactionType.REPAYMENT)
        disbursements = await store.find_credit_transactions(START, END, kind=CreditTransactionType.DISBURSEMENT)

        assert [r.amount for r in repayments] == [Decimal("25000")]
        assert repayments[0].kind == CreditTransactionType.REPAYMENT
        assert disbursements[0].amount == Decimal("100000")
        assert disbursements[0].beneficiary == MemberBeneficiary("Awa", "Diop")

    @pytest.mark.asyncio
    async def test_stock_movements_by_kind(self, seeded: SQLiteAdapter) -> None:
        rows = await JournalStore(seeded).find_stock_movements(START, END, kind=StockMovementType.ENTRY)

        assert len(rows) == 1
        assert rows[0].reference == "BL-1"
        assert rows[0].reason == "Livraison"
        assert rows[0].product_unit_price == Decimal("15000")

    @pytest.mark.asyncio
    async def test_cycles(self, seeded: SQLiteAdapter) -> None:
        store = JournalStore(seeded)

        complete = await store.find_tontine_cycles(START, END, status=TontineCycleStatus.COMPLETE)
        running = await store.find_tontine_cycles(START, END, status=TontineCycleStatus.IN_PROGRESS)

        assert len(complete) == 1
        assert complete[0].pot_amount == Decimal("40000")
        assert complete[0].cycle_number == 1
        assert running == []

    @pytest.mark.asyncio
    async def test_inclusive_bounds(self, seeded: SQLiteAdapter) -> None:
        """A record exactly on a bound is returned"""
        at = NOW - DAY
        sales = await JournalStore(seeded).find_food_credit_sales(at, at)

        assert len(sales) == 1

    @pytest.mark.asyncio
    async def test_unknown_beneficiary(self, db: SQLiteAdapter) -> None:
        w = BackOfficeWriter(db)
        product = await w.add_product("Huile", Decimal("6500"))
        await w.add_sale(product, 1, Decimal("6500"), NOW)
        await db.commit()

        sales = await JournalStore(db).find_food_credit_sales(START, END)

        assert sales[0].beneficiary == UnknownBeneficiary()


class TestJournalStoreSnapshot:
    """Snapshot counters"""

    @pytest.mark.asyncio
    async def test_counters(self, seeded: SQLiteAdapter) -> None:
        store = JournalStore(seeded)

        valuation = await store.get_stock_valuation()

        assert valuation.value == Decimal("15000") * 4 + Decimal("750.25") * 10
        assert valuation.product_count == 2
        assert await store.count_active_members() == 1
        assert await store.count_active_tontines() == 1
        assert await store.count_open_credits() == 1

    @pytest.mark.asyncio
    async def test_empty_database(self, db: SQLiteAdapter) -> None:
        store = JournalStore(db)

        valuation = await store.get_stock_valuation()

        assert valuation.value == Decimal("0")
        assert valuation.product_count == 0
        assert await store.count_open_credits() == 0


class TestEndToEnd:
    """Journal and summary over the SQLite store"""

    @pytest.mark.asyncio
    async def test_journal(self, seeded: SQLiteAdapter) -> None:
        result = await LedgerAggregator(JournalStore(seeded)).get_ledger(
            JournalQuery.from_params(now=NOW)
        )

        ids = [e.id for e in result.entries]
        assert sorted(ids) == sorted([
            "VENTE-1", "VENTE-2", "COT-1", "CONTRIB-1", "RMB-2", "DEC-1", "APPRO-1", "POT-1",
        ])
        # most recent first
        assert ids[0] == "VENTE-1"
        assert ids[-1] == "DEC-1"
        assert result.totals.inflow == Decimal("5000") + Decimal("20000") + Decimal("25000")
        assert result.totals.outflow == Decimal("100000") + Decimal("30000") + Decimal("40000")
        assert result.totals.activity == Decimal("750.25") * 3 + Decimal("15000")

    @pytest.mark.asyncio
    async def test_journal_labels(self, seeded: SQLiteAdapter) -> None:
        result = await LedgerAggregator(JournalStore(seeded)).get_ledger(
            JournalQuery.from_params(search="awa", now=NOW)
        )

        labels = {e.label for e in result.entries}
        assert "Vente Sucre 1kg ×3 — Awa Diop" in labels
        assert "Cotisation mensuelle — Awa Diop" in labels
        assert 'Versement pot "Tontine du marché" cycle #1 — Awa Diop' in labels
        assert "Remboursement crédit #1 — Awa Diop" in labels

    @pytest.mark.asyncio
    async def test_readonly_session(self, seeded: SQLiteAdapter) -> None:
        """The web reads through a read-only connection"""
        async with SQLiteAdapter(seeded.db_path, readonly=True) as ro:
            result = await LedgerAggregator(JournalStore(ro)).get_ledger(
                JournalQuery.from_params(category="POT_TONTINE", now=NOW)
            )

        assert [e.id for e in result.entries] == ["POT-1"]

    @pytest.mark.asyncio
    async def test_summary(self, seeded: SQLiteAdapter) -> None:
        summary = await FinancialSummaryBuilder(JournalStore(seeded)).build(30, now=NOW)

        assert summary.categories[JournalCategory.DUES].count == 1
        assert summary.categories[JournalCategory.TONTINE_PAYOUT].amount == Decimal("40000")
        assert summary.active_members == 1
        assert summary.open_credits == 1
        assert sum((f.outflow for f in summary.evolution), Decimal("0")) == summary.totals.outflow


class TestForeignTimestamps:
    """Rows written by other tools with a different timestamp layout"""

    @pytest_asyncio.fixture
    async def foreign(self, db: SQLiteAdapter) -> SQLiteAdapter:
        for paid_at in ("2026-10-10 12:00:00", "2026-10-10T00:30:00+01:00"):
            await db.execute(
                "INSERT INTO cotisation (amount, period, status, paid_at) VALUES (?, ?, ?, ?)",
                ("5000", "MENSUELLE", CotisationStatus.PAID.value, paid_at),
            )
        await db.commit()
        return db

    @pytest.mark.asyncio
    async def test_space_separated_in_day_window(self, foreign: SQLiteAdapter) -> None:
        result = await LedgerAggregator(JournalStore(foreign)).get_ledger(
            JournalQuery.from_params(date_start="2026-10-10", date_end="2026-10-10", now=NOW)
        )

        assert result.total == 1
        assert result.entries[0].id == "COT-1"
        assert result.entries[0].date == datetime(2026, 10, 10, 12, 0, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_offset_compared_in_utc(self, foreign: SQLiteAdapter) -> None:
        """00:30 at +01:00 is the evening before in UTC"""
        result = await LedgerAggregator(JournalStore(foreign)).get_ledger(
            JournalQuery.from_params(date_start="2026-10-09", date_end="2026-10-09", now=NOW)
        )

        assert [e.id for e in result.entries] == ["COT-2"]
        assert result.entries[0].date == datetime(2026, 10, 9, 23, 30, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def balances(db: SQLiteAdapter) -> SQLiteAdapter:
    """Balance sheet rows in every status, counted or not"""
    w = BackOfficeWriter(db)

    awa = await w.add_member("Awa", "Diop")
    rice = await w.add_product("Riz 25kg", Decimal("15000"), stock=4)

    await w.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PENDING, None, member_id=awa)
    await w.add_cotisation(Decimal("2500"), "MENSUELLE", CotisationStatus.PENDING, None, member_id=awa)
    await w.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PAID, NOW - DAY * 3, member_id=awa)
    await w.add_cotisation(Decimal("1000"), "MENSUELLE", CotisationStatus.LATE, NOW - DAY * 3, member_id=awa)

    await w.add_food_credit(member_id=awa, ceiling=Decimal("50000"), remaining=Decimal("35000"))
    await w.add_food_credit(
        member_id=awa, ceiling=Decimal("30000"), remaining=Decimal("0"),
        status=FoodCreditStatus.EXHAUSTED,
    )
    await w.add_food_credit(
        member_id=awa, ceiling=Decimal("20000"), status=FoodCreditStatus.EXPIRED,
    )

    await w.add_credit(
        Decimal("100000"), CreditStatus.PARTIALLY_REPAID, member_id=awa, remaining=Decimal("75000"),
    )
    await w.add_credit(Decimal("20000"), CreditStatus.APPROVED, member_id=awa)
    await w.add_credit(Decimal("10000"), CreditStatus.FULLY_REPAID, member_id=awa, remaining=Decimal("0"))
    await w.add_credit(Decimal("5000"), CreditStatus.PENDING, member_id=awa)

    tontine = await w.add_tontine("Tontine du marché")
    await w.add_cycle(
        tontine, 1, Decimal("40000"), TontineCycleStatus.COMPLETE, NOW - DAY * 4,
        beneficiary_member_id=awa,
    )
    await w.add_cycle(tontine, 2, Decimal("60000"))

    await w.add_sale(rice, 1, Decimal("15000"), NOW - DAY)
    await w.add_sale(rice, 1, Decimal("15000"), datetime(2025, 12, 31, 23, 59, tzinfo=timezone.utc))

    await db.commit()
    return db


class TestJournalStoreBalanceSheet:
    """Balance sheet sums"""

    @pytest.mark.asyncio
    async def test_sums(self, balances: SQLiteAdapter) -> None:
        store = JournalStore(balances)

        assert await store.sum_pending_cotisations() == OutstandingTotal(Decimal("7500"), 2)
        assert await store.sum_paid_cotisations() == OutstandingTotal(Decimal("5000"), 1)
        assert await store.sum_food_credit_balances() == OutstandingTotal(Decimal("35000"), 1)
        assert await store.sum_food_credit_ceilings() == OutstandingTotal(Decimal("80000"), 2)
        assert await store.sum_unrepaid_credits() == OutstandingTotal(Decimal("95000"), 2)
        assert await store.sum_open_tontine_pots() == OutstandingTotal(Decimal("60000"), 1)

    @pytest.mark.asyncio
    async def test_empty_database(self, db: SQLiteAdapter) -> None:
        total = await JournalStore(db).sum_unrepaid_credits()

        assert total == OutstandingTotal(Decimal("0"), 0)

    @pytest.mark.asyncio
    async def test_statements(self, balances: SQLiteAdapter) -> None:
        statements = await FinancialStatementsBuilder(JournalStore(balances)).build(now=NOW)

        assert statements.total_assets == Decimal("60000") + Decimal("7500") + Decimal("35000") + Decimal("95000")
        assert statements.commitments == Decimal("140000")
        assert statements.equity == Decimal("57500")
        # the 2025 sale is left out
        assert statements.income[JournalCategory.SALE] == Decimal("15000")
        assert statements.total_income == Decimal("20000")
        assert statements.total_expenses == Decimal("40000")
        assert statements.recovery_rate == 40
        # 45000 / 80000 = 56.25 %
        assert statements.food_credit_usage_rate == 56
        assert statements.net_margin == -100
        assert statements.expense_ratio == 200
