"""
Journal type definitions

Classification enums and the synthesized LedgerEntry
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from core.utils.timezone import to_iso_z


class JournalType(str, Enum):
    """Cash direction of a journal entry

    ACTIVITY is a non-cash event (a sale drawing down a pre-funded
    food credit); it never enters the net result.
    """

    INFLOW = "ENCAISSEMENT"
    OUTFLOW = "DECAISSEMENT"
    ACTIVITY = "ACTIVITE"


# "type" filter value selecting every JournalType
TYPE_FILTER_ALL = "TOUS"


class JournalCategory(str, Enum):
    """Source category of a journal entry"""

    SALE = "VENTE"
    DUES = "COTISATION"
    TONTINE_CONTRIBUTION = "CONTRIBUTION_TONTINE"
    CREDIT_REPAYMENT = "REMBOURSEMENT_CREDIT"
    STOCK_REPLENISHMENT = "APPROVISIONNEMENT"
    CREDIT_DISBURSEMENT = "CREDIT_DECAISSE"
    TONTINE_PAYOUT = "POT_TONTINE"


# Fixed category -> type classification
CATEGORY_TYPES: dict[JournalCategory, JournalType] = {
    JournalCategory.SALE: JournalType.ACTIVITY,
    JournalCategory.DUES: JournalType.INFLOW,
    JournalCategory.TONTINE_CONTRIBUTION: JournalType.INFLOW,
    JournalCategory.CREDIT_REPAYMENT: JournalType.INFLOW,
    JournalCategory.STOCK_REPLENISHMENT: JournalType.OUTFLOW,
    JournalCategory.CREDIT_DISBURSEMENT: JournalType.OUTFLOW,
    JournalCategory.TONTINE_PAYOUT: JournalType.OUTFLOW,
}


@dataclass(frozen=True)
class LedgerEntry:
    """Journal entry

    Built fresh for every request from one source record; never stored.
    `amount` is never negative, the direction lives in `type`.
    """

    id: str  # "{TAG}-{source_id}", unique by construction
    source_id: int
    date: datetime
    type: JournalType
    category: JournalCategory
    label: str
    amount: Decimal
    reference: str

    def to_dict(self) -> dict[str, Any]:
        """Wire representation (French keys, ISO date)"""
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "date": to_iso_z(self.date),
            "type": self.type.value,
            "categorie": self.category.value,
            "libelle": self.label,
            "montant": self.amount,
            "reference": self.reference,
        }


@dataclass(frozen=True)
class JournalTotals:
    """Totals over the whole filtered journal (before pagination)"""

    inflow: Decimal = Decimal("0")
    outflow: Decimal = Decimal("0")
    activity: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        """Cash result; activity is excluded"""
        return self.inflow - self.outflow

    @classmethod
    def from_entries(cls, entries: list[LedgerEntry]) -> "JournalTotals":
        sums = {journal_type: Decimal("0") for journal_type in JournalType}
        for entry in entries:
            sums[entry.type] += entry.amount
        return cls(
            inflow=sums[JournalType.INFLOW],
            outflow=sums[JournalType.OUTFLOW],
            activity=sums[JournalType.ACTIVITY],
        )

    def to_dict(self) -> dict[str, Decimal]:
        return {
            "encaissements": self.inflow,
            "decaissements": self.outflow,
            "activite": self.activity,
            "net": self.net,
        }
