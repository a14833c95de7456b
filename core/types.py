"""
Type definitions

Core enums shared by the store, the journal and the web layer.
Every Enum inherits from str so values serialize as plain strings.
"""

from enum import Enum


class AppMode(str, Enum):
    """Application mode (selects the database file)"""

    PRODUCTION = "production"
    DEMO = "demo"


class CotisationStatus(str, Enum):
    """Dues status"""

    PAID = "PAYEE"
    PENDING = "EN_ATTENTE"
    LATE = "EN_RETARD"


class ContributionStatus(str, Enum):
    """Tontine contribution status"""

    PAID = "PAYEE"
    PENDING = "EN_ATTENTE"


class CreditTransactionType(str, Enum):
    """Credit transaction direction"""

    REPAYMENT = "REMBOURSEMENT"
    DISBURSEMENT = "DECAISSEMENT"


class StockMovementType(str, Enum):
    """Stock movement direction"""

    ENTRY = "ENTREE"
    EXIT = "SORTIE"
    ADJUSTMENT = "AJUSTEMENT"


class TontineCycleStatus(str, Enum):
    """Tontine cycle status"""

    IN_PROGRESS = "EN_COURS"
    COMPLETE = "COMPLETE"


class TontineStatus(str, Enum):
    """Tontine status"""

    ACTIVE = "ACTIVE"
    FINISHED = "TERMINEE"
    SUSPENDED = "SUSPENDUE"


class MemberState(str, Enum):
    """Member account state"""

    ACTIVE = "ACTIF"
    INACTIVE = "INACTIF"
    SUSPENDED = "SUSPENDU"


class CreditStatus(str, Enum):
    """Credit status"""

    PENDING = "EN_ATTENTE"
    APPROVED = "APPROUVE"
    PARTIALLY_REPAID = "REMBOURSE_PARTIEL"
    FULLY_REPAID = "REMBOURSE_TOTAL"
    REJECTED = "REJETE"


# Credits still carrying an outstanding balance
OPEN_CREDIT_STATUSES: tuple[CreditStatus, ...] = (
    CreditStatus.PENDING,
    CreditStatus.APPROVED,
    CreditStatus.PARTIALLY_REPAID,
)

# Approved credits whose balance is still owed (balance sheet asset)
UNREPAID_CREDIT_STATUSES: tuple[CreditStatus, ...] = (
    CreditStatus.APPROVED,
    CreditStatus.PARTIALLY_REPAID,
)


class FoodCreditStatus(str, Enum):
    """Food credit status"""

    ACTIVE = "ACTIF"
    EXHAUSTED = "EPUISE"
    EXPIRED = "EXPIRE"


# Food credits whose ceiling is still committed
ALLOCATED_FOOD_CREDIT_STATUSES: tuple[FoodCreditStatus, ...] = (
    FoodCreditStatus.ACTIVE,
    FoodCreditStatus.EXHAUSTED,
)
