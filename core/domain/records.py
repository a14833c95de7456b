"""
Source records

Read-only shapes returned by the journal finders. Amounts keep whatever
numeric representation the store produced (Decimal for TEXT columns,
int/float for raw numbers); the entry builder normalizes them.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Union

from core.types import CreditTransactionType

Amount = Union[Decimal, int, float, str]


# -------------------------------------------------------------------------
# Beneficiary (member OR client, never both)
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class MemberBeneficiary:
    """Beneficiary registered as a member"""

    first_name: str
    last_name: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class ClientBeneficiary:
    """Beneficiary registered as a client"""

    first_name: str
    last_name: str

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class UnknownBeneficiary:
    """Record without a resolvable beneficiary"""

    @property
    def display_name(self) -> str:
        return ""


Beneficiary = Union[MemberBeneficiary, ClientBeneficiary, UnknownBeneficiary]


def resolve_beneficiary(
    member: tuple[str, str] | None,
    client: tuple[str, str] | None,
) -> Beneficiary:
    """Pick the beneficiary variant from the two nullable joins

    Args:
        member: (first_name, last_name) of the member join, or None
        client: (first_name, last_name) of the client join, or None

    Returns:
        MemberBeneficiary when a member is present, otherwise
        ClientBeneficiary, otherwise UnknownBeneficiary
    """
    if member is not None:
        return MemberBeneficiary(first_name=member[0], last_name=member[1])
    if client is not None:
        return ClientBeneficiary(first_name=client[0], last_name=client[1])
    return UnknownBeneficiary()


# -------------------------------------------------------------------------
# Records
# -------------------------------------------------------------------------

@dataclass(frozen=True)
class FoodCreditSaleRecord:
    """Sale of goods drawn on a food credit"""

    id: int
    created_at: datetime
    quantity: int
    unit_price: Amount
    product_name: str
    beneficiary: Beneficiary = field(default_factory=UnknownBeneficiary)


@dataclass(frozen=True)
class CotisationRecord:
    """Dues payment (paid_at is None until collected)"""

    id: int
    amount: Amount
    paid_at: datetime | None
    period: str
    beneficiary: Beneficiary = field(default_factory=UnknownBeneficiary)


@dataclass(frozen=True)
class TontineContributionRecord:
    """Contribution paid into a tontine cycle"""

    id: int
    amount: Amount
    paid_at: datetime | None
    tontine_name: str


@dataclass(frozen=True)
class CreditTransactionRecord:
    """Repayment or disbursement on a credit"""

    id: int
    amount: Amount
    created_at: datetime
    credit_id: int
    kind: CreditTransactionType
    beneficiary: Beneficiary = field(default_factory=UnknownBeneficiary)


@dataclass(frozen=True)
class StockMovementRecord:
    """Stock movement valued at the product unit price"""

    id: int
    quantity: int
    moved_at: datetime
    reference: str
    reason: str | None
    product_name: str
    product_unit_price: Amount


@dataclass(frozen=True)
class TontineCycleRecord:
    """Tontine cycle closure paying out the pot"""

    id: int
    pot_amount: Amount
    cycle_number: int
    closed_at: datetime | None
    tontine_name: str
    beneficiary: Beneficiary = field(default_factory=UnknownBeneficiary)


@dataclass(frozen=True)
class StockValuation:
    """Current stock value snapshot"""

    value: Amount
    product_count: int


@dataclass(frozen=True)
class OutstandingTotal:
    """Sum and row count of a balance sheet line"""

    amount: Amount
    count: int
