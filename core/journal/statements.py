"""
Financial statements

Simplified balance sheet (current state), year-to-date income statement
and the derived ratios. The income statement runs through the journal
category table: inflow and activity categories (sales included) are
income, outflow categories are expenses.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_FLOOR, Decimal
from typing import Any

from adapters.interfaces import IJournalSource, ISnapshotSource
from core.domain.records import OutstandingTotal
from core.journal.aggregator import collect_entries
from core.journal.entry_builder import to_decimal
from core.journal.sources import CATEGORY_SOURCES
from core.journal.types import CATEGORY_TYPES, JournalCategory, JournalType
from core.utils.aio import gather_or_cancel
from core.utils.timezone import ensure_utc, now_utc, start_of_day

logger = logging.getLogger(__name__)

ZERO = Decimal("0")

INCOME_CATEGORIES: tuple[JournalCategory, ...] = tuple(
    category for category, journal_type in CATEGORY_TYPES.items()
    if journal_type in (JournalType.INFLOW, JournalType.ACTIVITY)
)
EXPENSE_CATEGORIES: tuple[JournalCategory, ...] = tuple(
    category for category, journal_type in CATEGORY_TYPES.items()
    if journal_type == JournalType.OUTFLOW
)


def percent(numerator: Decimal, denominator: Decimal) -> int:
    """numerator / denominator as a whole percentage

    Halves round up (-2.5 gives -2). 0 when the denominator is not
    positive.
    """
    if denominator <= 0:
        return 0
    ratio = numerator * 100 / denominator
    return int((ratio + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def _line(total: OutstandingTotal) -> OutstandingTotal:
    return OutstandingTotal(amount=to_decimal(total.amount), count=total.count)


@dataclass
class FinancialStatements:
    """Result of FinancialStatementsBuilder.build"""

    year: int
    as_of: datetime
    stock_value: Decimal
    product_count: int
    dues_receivable: OutstandingTotal
    food_credit_balances: OutstandingTotal
    unrepaid_credits: OutstandingTotal
    open_tontine_pots: OutstandingTotal
    food_credit_ceilings: OutstandingTotal
    paid_cotisations: OutstandingTotal
    income: dict[JournalCategory, Decimal] = field(default_factory=dict)

    # balance sheet

    @property
    def total_assets(self) -> Decimal:
        return (
            self.stock_value
            + self.dues_receivable.amount
            + self.food_credit_balances.amount
            + self.unrepaid_credits.amount
        )

    @property
    def commitments(self) -> Decimal:
        """Open tontine pots plus allocated food credit ceilings"""
        return self.open_tontine_pots.amount + self.food_credit_ceilings.amount

    @property
    def equity(self) -> Decimal:
        """Assets net of commitments, floored at 0"""
        return max(ZERO, self.total_assets - self.commitments)

    @property
    def total_liabilities(self) -> Decimal:
        return self.commitments + self.equity

    # income statement

    def _amount(self, category: JournalCategory) -> Decimal:
        return self.income.get(category, ZERO)

    @property
    def total_income(self) -> Decimal:
        return sum((self._amount(c) for c in INCOME_CATEGORIES), ZERO)

    @property
    def total_expenses(self) -> Decimal:
        return sum((self._amount(c) for c in EXPENSE_CATEGORIES), ZERO)

    @property
    def net_result(self) -> Decimal:
        return self.total_income - self.total_expenses

    # ratios

    @property
    def recovery_rate(self) -> int:
        """Collected dues over collected plus pending dues"""
        paid = self.paid_cotisations.amount
        return percent(paid, paid + self.dues_receivable.amount)

    @property
    def food_credit_usage_rate(self) -> int:
        """Consumed share of the allocated food credit ceilings"""
        ceilings = self.food_credit_ceilings.amount
        return percent(ceilings - self.food_credit_balances.amount, ceilings)

    @property
    def net_margin(self) -> int:
        return percent(self.net_result, self.total_income)

    @property
    def expense_ratio(self) -> int:
        return percent(self.total_expenses, self.total_income)

    def to_dict(self) -> dict[str, Any]:
        """Body of the financial statements endpoint (`data` field)"""
        return {
            "annee": self.year,
            "bilan": {
                "actif": {
                    "stock": {
                        "valeur": self.stock_value,
                        "nombreProduits": self.product_count,
                    },
                    "creancesCotisations": {
                        "valeur": self.dues_receivable.amount,
                        "count": self.dues_receivable.count,
                    },
                    "creditsAlimentaires": {
                        "valeur": self.food_credit_balances.amount,
                        "count": self.food_credit_balances.count,
                    },
                    "creditsFinanciers": {
                        "valeur": self.unrepaid_credits.amount,
                        "count": self.unrepaid_credits.count,
                    },
                    "total": self.total_assets,
                },
                "passif": {
                    "engagementsTontines": {
                        "valeur": self.open_tontine_pots.amount,
                        "count": self.open_tontine_pots.count,
                    },
                    "creditsAlimAlloues": {
                        "valeur": self.food_credit_ceilings.amount,
                    },
                    "capitauxPropres": self.equity,
                    "total": self.total_liabilities,
                },
            },
            "compteResultat": {
                "produits": {
                    "ventes": self._amount(JournalCategory.SALE),
                    "cotisationsCollectees": self._amount(JournalCategory.DUES),
                    "contributionsTontines": self._amount(JournalCategory.TONTINE_CONTRIBUTION),
                    "remboursementsCredits": self._amount(JournalCategory.CREDIT_REPAYMENT),
                    "total": self.total_income,
                },
                "charges": {
                    "approvisionnements": self._amount(JournalCategory.STOCK_REPLENISHMENT),
                    "creditsDecaisses": self._amount(JournalCategory.CREDIT_DISBURSEMENT),
                    "potsTontinesVerses": self._amount(JournalCategory.TONTINE_PAYOUT),
                    "total": self.total_expenses,
                },
                "resultatNet": self.net_result,
            },
            "ratios": {
                "tauxRecouvrement": self.recovery_rate,
                "tauxUtilisationCreditsAlim": self.food_credit_usage_rate,
                "margeNette": self.net_margin,
                "ratioCharges": self.expense_ratio,
            },
        }


class FinancialStatementsBuilder:
    """Balance sheet, year-to-date income statement and ratios

    Args:
        source: store implementing both IJournalSource and ISnapshotSource

    Usage:
    ```python
    statements = await FinancialStatementsBuilder(JournalStore(db)).build()
    body = statements.to_dict()
    ```
    """

    def __init__(self, source: Any):
        if not isinstance(source, IJournalSource) or not isinstance(source, ISnapshotSource):
            raise TypeError(
                f"{type(source).__name__} must implement IJournalSource and ISnapshotSource"
            )
        self.source = source

    async def build(self, now: datetime | None = None) -> FinancialStatements:
        """Build the statements as of `now`

        The income statement covers 1 January (UTC) of the current year
        up to `now`.

        Args:
            now: reference time (defaults to the current time)

        Returns:
            FinancialStatements
        """
        as_of = ensure_utc(now) if now is not None else now_utc()
        year_start = start_of_day(date(as_of.year, 1, 1))

        (
            entries,
            valuation,
            dues_receivable,
            paid_cotisations,
            food_credit_balances,
            food_credit_ceilings,
            unrepaid_credits,
            open_tontine_pots,
        ) = await gather_or_cancel(
            collect_entries(self.source, CATEGORY_SOURCES, year_start, as_of),
            self.source.get_stock_valuation(),
            self.source.sum_pending_cotisations(),
            self.source.sum_paid_cotisations(),
            self.source.sum_food_credit_balances(),
            self.source.sum_food_credit_ceilings(),
            self.source.sum_unrepaid_credits(),
            self.source.sum_open_tontine_pots(),
        )

        income = {category: ZERO for category in JournalCategory}
        for entry in entries:
            income[entry.category] += entry.amount

        logger.debug(f"Financial statements built: year={as_of.year} entries={len(entries)}")

        return FinancialStatements(
            year=as_of.year,
            as_of=as_of,
            stock_value=to_decimal(valuation.value),
            product_count=valuation.product_count,
            dues_receivable=_line(dues_receivable),
            food_credit_balances=_line(food_credit_balances),
            unrepaid_credits=_line(unrepaid_credits),
            open_tontine_pots=_line(open_tontine_pots),
            food_credit_ceilings=_line(food_credit_ceilings),
            paid_cotisations=_line(paid_cotisations),
            income=income,
        )
