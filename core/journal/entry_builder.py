"""
Journal entry builder

Turns source records into LedgerEntry objects. This is the only place
where source amounts are converted to Decimal.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

from core.domain.records import (
    Amount,
    Beneficiary,
    CotisationRecord,
    CreditTransactionRecord,
    FoodCreditSaleRecord,
    StockMovementRecord,
    TontineContributionRecord,
    TontineCycleRecord,
)
from core.journal.types import CATEGORY_TYPES, JournalCategory, LedgerEntry
from core.utils.timezone import ensure_utc

logger = logging.getLogger(__name__)


def to_decimal(value: Amount) -> Decimal:
    """Normalize a source amount to Decimal

    Floats go through str() so 0.1 stays 0.1 instead of its binary
    expansion.

    Raises:
        ValueError: the value is not numeric, or is NaN / infinite
    """
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"not a numeric amount: {value!r}") from e

    if not result.is_finite():
        raise ValueError(f"not a finite amount: {value!r}")
    return result


def _who(beneficiary: Beneficiary) -> str:
    """Label suffix naming the beneficiary (empty when unknown)"""
    name = beneficiary.display_name
    return f" — {name}" if name else ""


def _entry(
    category: JournalCategory,
    tag: str,
    source_id: int,
    date: datetime,
    label: str,
    amount: Decimal,
    reference: str,
) -> LedgerEntry:
    if amount < 0:
        logger.warning(
            f"Negative amount on {tag}-{source_id} ({amount}), using absolute value"
        )
        amount = -amount

    return LedgerEntry(
        id=f"{tag}-{source_id}",
        source_id=source_id,
        date=ensure_utc(date),
        type=CATEGORY_TYPES[category],
        category=category,
        label=label,
        amount=amount,
        reference=reference,
    )


# -------------------------------------------------------------------------
# Per-category builders (None means "skip this record")
# -------------------------------------------------------------------------

def build_sale_entry(record: FoodCreditSaleRecord) -> LedgerEntry | None:
    """VENTE: quantity x unit price, dated at creation"""
    return _entry(
        JournalCategory.SALE,
        "VENTE",
        record.id,
        record.created_at,
        f"Vente {record.product_name} ×{record.quantity}{_who(record.beneficiary)}",
        record.quantity * to_decimal(record.unit_price),
        f"V#{record.id}",
    )


def build_dues_entry(record: CotisationRecord) -> LedgerEntry | None:
    """COTISATION: dated at payment; unpaid dues are skipped"""
    if record.paid_at is None:
        return None
    return _entry(
        JournalCategory.DUES,
        "COT",
        record.id,
        record.paid_at,
        f"Cotisation {record.period.lower()}{_who(record.beneficiary)}",
        to_decimal(record.amount),
        f"COT#{record.id}",
    )


def build_contribution_entry(record: TontineContributionRecord) -> LedgerEntry | None:
    """CONTRIBUTION_TONTINE: dated at payment; unpaid ones are skipped"""
    if record.paid_at is None:
        return None
    return _entry(
        JournalCategory.TONTINE_CONTRIBUTION,
        "CONTRIB",
        record.id,
        record.paid_at,
        f'Contribution tontine "{record.tontine_name}"',
        to_decimal(record.amount),
        f"CONTRIB#{record.id}",
    )


def build_repayment_entry(record: CreditTransactionRecord) -> LedgerEntry | None:
    """REMBOURSEMENT_CREDIT"""
    return _entry(
        JournalCategory.CREDIT_REPAYMENT,
        "RMB",
        record.id,
        record.created_at,
        f"Remboursement crédit #{record.credit_id}{_who(record.beneficiary)}",
        to_decimal(record.amount),
        f"RMB#{record.id}",
    )


def build_disbursement_entry(record: CreditTransactionRecord) -> LedgerEntry | None:
    """CREDIT_DECAISSE"""
    return _entry(
        JournalCategory.CREDIT_DISBURSEMENT,
        "DEC",
        record.id,
        record.created_at,
        f"Décaissement crédit #{record.credit_id}{_who(record.beneficiary)}",
        to_decimal(record.amount),
        f"DEC#{record.id}",
    )


def build_replenishment_entry(record: StockMovementRecord) -> LedgerEntry | None:
    """APPROVISIONNEMENT: quantity x product unit price, movement reference"""
    reason = f" ({record.reason})" if record.reason else ""
    return _entry(
        JournalCategory.STOCK_REPLENISHMENT,
        "APPRO",
        record.id,
        record.moved_at,
        f"Appro. {record.product_name} ×{record.quantity}{reason}",
        record.quantity * to_decimal(record.product_unit_price),
        record.reference,
    )


def build_payout_entry(record: TontineCycleRecord) -> LedgerEntry | None:
    """POT_TONTINE: dated at closure; open cycles are skipped"""
    if record.closed_at is None:
        return None
    return _entry(
        JournalCategory.TONTINE_PAYOUT,
        "POT",
        record.id,
        record.closed_at,
        f'Versement pot "{record.tontine_name}" cycle #{record.cycle_number}'
        f"{_who(record.beneficiary)}",
        to_decimal(record.pot_amount),
        f"POT#{record.id}",
    )


def build_entries(
    build: Callable[[Any], LedgerEntry | None],
    records: Iterable[Any],
) -> list[LedgerEntry]:
    """Apply a builder to a batch, dropping skipped records"""
    entries = []
    for record in records:
        entry = build(record)
        if entry is not None:
            entries.append(entry)
    return entries
