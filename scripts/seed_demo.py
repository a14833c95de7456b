"""
Demo database seed

Creates the back-office schema in the demo database and inserts a small
data set with at least one record per journal category, dated within
the last 30 days so the default journal window shows all of it.

Usage:
    python -m scripts.seed_demo
    python -m scripts.seed_demo --db data/other.db
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Add the project root to the Python path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from adapters.db.sqlite_adapter import SQLiteAdapter, get_db_path, init_schema
from core.storage.backoffice_writer import BackOfficeWriter
from core.types import (
    AppMode,
    ContributionStatus,
    CotisationStatus,
    CreditStatus,
    CreditTransactionType,
    MemberState,
    StockMovementType,
    TontineCycleStatus,
)
from core.utils.timezone import now_utc

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


async def seed(db: SQLiteAdapter, now: datetime) -> None:
    """Insert the demo rows

    Args:
        db: writable, schema-initialized adapter
        now: reference time; every row is dated relative to it
    """
    writer = BackOfficeWriter(db)

    def days_ago(days: int, hour: int = 10) -> datetime:
        return (now - timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)

    # People
    awa = await writer.add_member("Awa", "Diop")
    moussa = await writer.add_member("Moussa", "Sarr")
    await writer.add_member("Fatou", "Ndiaye", state=MemberState.INACTIVE)
    khady = await writer.add_client("Khady", "Fall")

    # Products and stock
    rice = await writer.add_product("Riz 25kg", Decimal("15000"), stock=40)
    oil = await writer.add_product("Huile 5L", Decimal("6500"), stock=25)
    sugar = await writer.add_product("Sucre 1kg", Decimal("750"), stock=120)

    await writer.add_stock_movement(rice, StockMovementType.ENTRY, 20, "BL-2041", days_ago(20), reason="Livraison fournisseur")
    await writer.add_stock_movement(oil, StockMovementType.ENTRY, 10, "BL-2042", days_ago(12))
    await writer.add_stock_movement(sugar, StockMovementType.EXIT, 5, "SO-0007", days_ago(3), reason="Casse")

    # Food credit sales
    credit_awa = await writer.add_food_credit(
        member_id=awa, ceiling=Decimal("50000"), remaining=Decimal("35000")
    )
    credit_khady = await writer.add_food_credit(
        client_id=khady, ceiling=Decimal("30000"), remaining=Decimal("27000")
    )
    await writer.add_sale(rice, 1, Decimal("15000"), days_ago(9, 11), food_credit_id=credit_awa)
    await writer.add_sale(sugar, 4, Decimal("750"), days_ago(2, 16), food_credit_id=credit_khady)

    # Dues
    await writer.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PAID, days_ago(15), member_id=awa)
    await writer.add_cotisation(Decimal("5000"), "MENSUELLE", CotisationStatus.PAID, days_ago(14), member_id=moussa)
    await writer.add_cotisation(Decimal("2500"), "ANNUELLE", CotisationStatus.PENDING, member_id=khady)

    # Tontine: one closed cycle, one running
    tontine = await writer.add_tontine("Tontine du marché")
    closed = await writer.add_cycle(
        tontine,
        1,
        pot_amount=Decimal("60000"),
        status=TontineCycleStatus.COMPLETE,
        closed_at=days_ago(6, 18),
        beneficiary_member_id=moussa,
    )
    running = await writer.add_cycle(tontine, 2, pot_amount=Decimal("60000"))
    for paid_days_ago in (25, 24, 22):
        await writer.add_contribution(closed, Decimal("20000"), ContributionStatus.PAID, days_ago(paid_days_ago))
    await writer.add_contribution(running, Decimal("20000"), ContributionStatus.PAID, days_ago(1))
    await writer.add_contribution(running, Decimal("20000"), ContributionStatus.PENDING)

    # Credits
    loan = await writer.add_credit(
        Decimal("100000"), CreditStatus.PARTIALLY_REPAID, member_id=awa, remaining=Decimal("75000")
    )
    await writer.add_credit_transaction(loan, CreditTransactionType.DISBURSEMENT, Decimal("100000"), days_ago(28))
    await writer.add_credit_transaction(loan, CreditTransactionType.REPAYMENT, Decimal("25000"), days_ago(7))
    await writer.add_credit(Decimal("40000"), CreditStatus.PENDING, client_id=khady)

    await db.commit()


async def main(db_path: Path) -> None:
    """Seed the demo database

    Args:
        db_path: target SQLite file
    """
    logger.info(f"Seeding demo database: {db_path}")

    async with SQLiteAdapter(db_path) as db:
        await init_schema(db)

        row = await db.fetchone("SELECT COUNT(*) FROM member")
        if row and row[0] > 0:
            logger.warning("Database already has members, nothing inserted")
            return

        await seed(db, now_utc())

    logger.info("Demo data inserted")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed the demo database")
    parser.add_argument(
        "--db",
        type=Path,
        default=get_db_path(AppMode.DEMO),
        help="SQLite file (default: demo database)",
    )
    args = parser.parse_args()

    asyncio.run(main(args.db))
