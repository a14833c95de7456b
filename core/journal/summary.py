"""
Financial summary

Period synthesis for the accountant dashboard: per-category totals,
net cash result, day-by-day evolution and a point-in-time snapshot.
Built on the same category table as the journal so both views classify
every record identically.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from adapters.interfaces import IJournalSource, ISnapshotSource
from core.constants import JournalDefaults
from core.journal.aggregator import collect_entries
from core.journal.entry_builder import to_decimal
from core.journal.sources import CATEGORY_SOURCES
from core.journal.types import JournalCategory, JournalTotals, JournalType, LedgerEntry
from core.utils.aio import gather_or_cancel
from core.utils.timezone import ensure_utc, now_utc, to_iso_z

logger = logging.getLogger(__name__)


def resolve_period(period: int | None) -> int:
    """Accept 7/30/90/365 days, anything else falls back to 30"""
    if period in JournalDefaults.SUMMARY_PERIODS:
        return period
    return JournalDefaults.DEFAULT_PERIOD


@dataclass
class CategoryTotal:
    """Amount and record count of one category"""

    amount: Decimal = Decimal("0")
    count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {"montant": self.amount, "count": self.count}


@dataclass
class DailyFlow:
    """Cash in and out of one calendar day"""

    day: date
    inflow: Decimal = Decimal("0")
    outflow: Decimal = Decimal("0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "encaissements": self.inflow,
            "decaissements": self.outflow,
        }


@dataclass
class FinancialSummary:
    """Result of FinancialSummaryBuilder.build"""

    period: int
    start: datetime
    end: datetime
    categories: dict[JournalCategory, CategoryTotal]
    totals: JournalTotals
    evolution: list[DailyFlow]
    stock_value: Decimal = Decimal("0")
    product_count: int = 0
    active_members: int = 0
    active_tontines: int = 0
    open_credits: int = 0

    @property
    def usage_rate(self) -> int:
        """Outflow as a rounded percentage of inflow (0 without inflow)"""
        if self.totals.inflow <= 0:
            return 0
        rate = self.totals.outflow * 100 / self.totals.inflow
        return int(rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    def to_dict(self) -> dict[str, Any]:
        """Body of the summary endpoint (`data` field)"""
        cats = self.categories
        return {
            "periode": {
                "debut": to_iso_z(self.start),
                "fin": to_iso_z(self.end),
                "jours": self.period,
            },
            "encaissements": {
                "cotisations": cats[JournalCategory.DUES].to_dict(),
                "contributions_tontines": cats[JournalCategory.TONTINE_CONTRIBUTION].to_dict(),
                "remboursements_credits": cats[JournalCategory.CREDIT_REPAYMENT].to_dict(),
                "total": self.totals.inflow,
            },
            "activiteProduits": {
                "ventes": cats[JournalCategory.SALE].to_dict(),
            },
            "decaissements": {
                "approvisionnements": cats[JournalCategory.STOCK_REPLENISHMENT].to_dict(),
                "credits_decaisses": cats[JournalCategory.CREDIT_DISBURSEMENT].to_dict(),
                "pots_tontines": cats[JournalCategory.TONTINE_PAYOUT].to_dict(),
                "total": self.totals.outflow,
            },
            "resultat_net": self.totals.net,
            "taux_utilisation": self.usage_rate,
            "evolution": [flow.to_dict() for flow in self.evolution],
            "snapshot": {
                "stock": {
                    "valeur": self.stock_value,
                    "nombreProduits": self.product_count,
                },
                "membresActifs": self.active_members,
                "tontinesActives": self.active_tontines,
                "creditsEnCours": self.open_credits,
            },
        }


def build_evolution(
    entries: list[LedgerEntry],
    first_day: date,
    last_day: date,
) -> list[DailyFlow]:
    """One DailyFlow per calendar day in [first_day, last_day]

    Activity entries are not cash and are left out.
    """
    flows: dict[date, DailyFlow] = {}
    day = first_day
    while day <= last_day:
        flows[day] = DailyFlow(day=day)
        day += timedelta(days=1)

    for entry in entries:
        flow = flows.get(ensure_utc(entry.date).date())
        if flow is None:
            continue
        if entry.type == JournalType.INFLOW:
            flow.inflow += entry.amount
        elif entry.type == JournalType.OUTFLOW:
            flow.outflow += entry.amount

    return list(flows.values())


class FinancialSummaryBuilder:
    """Period financial summary

    Args:
        source: store implementing both IJournalSource and ISnapshotSource
    """

    def __init__(self, source: Any):
        if not isinstance(source, IJournalSource) or not isinstance(source, ISnapshotSource):
            raise TypeError(
                f"{type(source).__name__} must implement IJournalSource and ISnapshotSource"
            )
        self.source = source

    async def build(self, period: int | None = None, now: datetime | None = None) -> FinancialSummary:
        """Build the summary of the last `period` days

        Args:
            period: window length in days (7, 30, 90 or 365)
            now: window end (defaults to the current time)

        Returns:
            FinancialSummary
        """
        days = resolve_period(period)
        end = ensure_utc(now) if now is not None else now_utc()
        start = end - timedelta(days=days)

        (
            entries,
            valuation,
            active_members,
            active_tontines,
            open_credits,
        ) = await gather_or_cancel(
            collect_entries(self.source, CATEGORY_SOURCES, start, end),
            self.source.get_stock_valuation(),
            self.source.count_active_members(),
            self.source.count_active_tontines(),
            self.source.count_open_credits(),
        )

        categories = {category: CategoryTotal() for category in JournalCategory}
        for entry in entries:
            total = categories[entry.category]
            total.amount += entry.amount
            total.count += 1

        logger.debug(f"Summary built: period={days}d entries={len(entries)}")

        return FinancialSummary(
            period=days,
            start=start,
            end=end,
            categories=categories,
            totals=JournalTotals.from_entries(entries),
            evolution=build_evolution(entries, start.date(), end.date()),
            stock_value=to_decimal(valuation.value),
            product_count=valuation.product_count,
            active_members=active_members,
            active_tontines=active_tontines,
            open_credits=open_credits,
        )
