"""
core/journal/entry_builder.py tests

One construction rule per category, plus amount normalization
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from core.domain.records import (
    ClientBeneficiary,
    CotisationRecord,
    CreditTransactionRecord,
    FoodCreditSaleRecord,
    MemberBeneficiary,
    StockMovementRecord,
    TontineContributionRecord,
    TontineCycleRecord,
    UnknownBeneficiary,
    resolve_beneficiary,
)
from core.journal.entry_builder import (
    build_contribution_entry,
    build_disbursement_entry,
    build_dues_entry,
    build_entries,
    build_payout_entry,
    build_repayment_entry,
    build_replenishment_entry,
    build_sale_entry,
    to_decimal,
)
from core.journal.types import JournalCategory, JournalType
from core.types import CreditTransactionType

WHEN = datetime(2026, 10, 5, 14, 0, tzinfo=timezone.utc)
AWA = MemberBeneficiary(first_name="Awa", last_name="Diop")


class TestResolveBeneficiary:
    """resolve_beneficiary tests"""

    def test_member_first(self) -> None:
        result = resolve_beneficiary(("Awa", "Diop"), ("Khady", "Fall"))

        assert result == AWA

    def test_client_fallback(self) -> None:
        result = resolve_beneficiary(None, ("Khady", "Fall"))

        assert isinstance(result, ClientBeneficiary)
        assert result.display_name == "Khady Fall"

    def test_unknown(self) -> None:
        result = resolve_beneficiary(None, None)

        assert isinstance(result, UnknownBeneficiary)
        assert result.display_name == ""


class TestToDecimal:
    """to_decimal tests"""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (Decimal("12.50"), Decimal("12.50")),
            (1500, Decimal("1500")),
            (0.1, Decimal("0.1")),
            ("2500.75", Decimal("2500.75")),
        ],
    )
    def test_numeric(self, value, expected) -> None:
        assert to_decimal(value) == expected

    def test_not_numeric(self) -> None:
        with pytest.raises(ValueError):
            to_decimal("abc")

    @pytest.mark.parametrize(
        "value",
        [Decimal("NaN"), Decimal("Infinity"), float("nan"), float("-inf"), "NaN", "sNaN"],
    )
    def test_not_finite(self, value) -> None:
        with pytest.raises(ValueError):
            to_decimal(value)

    def test_nan_amount_rejected_by_builder(self) -> None:
        """A NaN store amount surfaces as ValueError, not InvalidOperation"""
        record = CotisationRecord(id=1, amount=Decimal("NaN"), paid_at=WHEN, period="MENSUELLE")

        with pytest.raises(ValueError, match="finite"):
            build_dues_entry(record)


class TestSaleEntry:
    """VENTE"""

    def test_with_member(self) -> None:
        record = FoodCreditSaleRecord(
            id=12,
            created_at=WHEN,
            quantity=3,
            unit_price=Decimal("750"),
            product_name="Sucre 1kg",
            beneficiary=AWA,
        )

        entry = build_sale_entry(record)

        assert entry.id == "VENTE-12"
        assert entry.source_id == 12
        assert entry.type == JournalType.ACTIVITY
        assert entry.category == JournalCategory.SALE
        assert entry.label == "Vente Sucre 1kg ×3 — Awa Diop"
        assert entry.amount == Decimal("2250")
        assert entry.reference == "V#12"
        assert entry.date == WHEN

    def test_without_beneficiary(self) -> None:
        record = FoodCreditSaleRecord(
            id=1,
            created_at=WHEN,
            quantity=1,
            unit_price=100,
            product_name="Riz",
        )

        assert build_sale_entry(record).label == "Vente Riz ×1"


class TestDuesEntry:
    """COTISATION"""

    def test_paid(self) -> None:
        record = CotisationRecord(
            id=4,
            amount=Decimal("5000"),
            paid_at=WHEN,
            period="MENSUELLE",
            beneficiary=ClientBeneficiary(first_name="Khady", last_name="Fall"),
        )

        entry = build_dues_entry(record)

        assert entry.id == "COT-4"
        assert entry.type == JournalType.INFLOW
        assert entry.label == "Cotisation mensuelle — Khady Fall"
        assert entry.reference == "COT#4"
        assert entry.amount == Decimal("5000")

    def test_unpaid_is_skipped(self) -> None:
        record = CotisationRecord(id=5, amount=Decimal("5000"), paid_at=None, period="MENSUELLE")

        assert build_dues_entry(record) is None


class TestContributionEntry:
    """CONTRIBUTION_TONTINE"""

    def test_paid(self) -> None:
        record = TontineContributionRecord(
            id=9,
            amount=Decimal("20000"),
            paid_at=WHEN,
            tontine_name="Tontine du marché",
        )

        entry = build_contribution_entry(record)

        assert entry.id == "CONTRIB-9"
        assert entry.type == JournalType.INFLOW
        assert entry.label == 'Contribution tontine "Tontine du marché"'
        assert entry.reference == "CONTRIB#9"

    def test_unpaid_is_skipped(self) -> None:
        record = TontineContributionRecord(id=9, amount=1, paid_at=None, tontine_name="T")

        assert build_contribution_entry(record) is None


class TestCreditEntries:
    """REMBOURSEMENT_CREDIT / CREDIT_DECAISSE"""

    def test_repayment(self) -> None:
        record = CreditTransactionRecord(
            id=31,
            amount=Decimal("25000"),
            created_at=WHEN,
            credit_id=8,
            kind=CreditTransactionType.REPAYMENT,
            beneficiary=AWA,
        )

        entry = build_repayment_entry(record)

        assert entry.id == "RMB-31"
        assert entry.type == JournalType.INFLOW
        assert entry.category == JournalCategory.CREDIT_REPAYMENT
        assert entry.label == "Remboursement crédit #8 — Awa Diop"
        assert entry.reference == "RMB#31"

    def test_disbursement(self) -> None:
        record = CreditTransactionRecord(
            id=30,
            amount=Decimal("100000"),
            created_at=WHEN,
            credit_id=8,
            kind=CreditTransactionType.DISBURSEMENT,
        )

        entry = build_disbursement_entry(record)

        assert entry.id == "DEC-30"
        assert entry.type == JournalType.OUTFLOW
        assert entry.category == JournalCategory.CREDIT_DISBURSEMENT
        assert entry.label == "Décaissement crédit #8"
        assert entry.reference == "DEC#30"


class TestReplenishmentEntry:
    """APPROVISIONNEMENT"""

    def test_with_reason(self) -> None:
        record = StockMovementRecord(
            id=2,
            quantity=20,
            moved_at=WHEN,
            reference="BL-2041",
            reason="Livraison fournisseur",
            product_name="Riz 25kg",
            product_unit_price=Decimal("15000"),
        )

        entry = build_replenishment_entry(record)

        assert entry.id == "APPRO-2"
        assert entry.type == JournalType.OUTFLOW
        assert entry.label == "Appro. Riz 25kg ×20 (Livraison fournisseur)"
        assert entry.amount == Decimal("300000")
        assert entry.reference == "BL-2041"

    def test_without_reason(self) -> None:
        record = StockMovementRecord(
            id=3,
            quantity=2,
            moved_at=WHEN,
            reference="BL-1",
            reason=None,
            product_name="Huile 5L",
            product_unit_price="6500",
        )

        entry = build_replenishment_entry(record)

        assert entry.label == "Appro. Huile 5L ×2"
        assert entry.amount == Decimal("13000")


class TestPayoutEntry:
    """POT_TONTINE"""

    def test_closed_cycle(self) -> None:
        record = TontineCycleRecord(
            id=6,
            pot_amount=Decimal("60000"),
            cycle_number=3,
            closed_at=WHEN,
            tontine_name="Tontine du marché",
            beneficiary=AWA,
        )

        entry = build_payout_entry(record)

        assert entry.id == "POT-6"
        assert entry.type == JournalType.OUTFLOW
        assert entry.label == 'Versement pot "Tontine du marché" cycle #3 — Awa Diop'
        assert entry.reference == "POT#6"

    def test_open_cycle_is_skipped(self) -> None:
        record = TontineCycleRecord(
            id=7, pot_amount=1, cycle_number=1, closed_at=None, tontine_name="T"
        )

        assert build_payout_entry(record) is None


class TestAmountNormalization:
    """Negative and non-UTC inputs"""

    def test_negative_amount_uses_absolute_value(self, caplog: pytest.LogCaptureFixture) -> None:
        record = CotisationRecord(id=1, amount=Decimal("-500"), paid_at=WHEN, period="X")

        with caplog.at_level(logging.WARNING, logger="core.journal.entry_builder"):
            entry = build_dues_entry(record)

        assert entry.amount == Decimal("500")
        assert entry.type == JournalType.INFLOW
        assert "COT-1" in caplog.text

    def test_date_normalized_to_utc(self) -> None:
        plus_two = timezone(timedelta(hours=2))
        record = CotisationRecord(
            id=1,
            amount=1,
            paid_at=datetime(2026, 10, 5, 16, 0, tzinfo=plus_two),
            period="X",
        )

        assert build_dues_entry(record).date == WHEN


class TestBuildEntries:
    """build_entries tests"""

    def test_drops_skipped_records(self) -> None:
        records = [
            CotisationRecord(id=1, amount=1, paid_at=WHEN, period="A"),
            CotisationRecord(id=2, amount=1, paid_at=None, period="A"),
            CotisationRecord(id=3, amount=1, paid_at=WHEN, period="A"),
        ]

        entries = build_entries(build_dues_entry, records)

        assert [e.id for e in entries] == ["COT-1", "COT-3"]
