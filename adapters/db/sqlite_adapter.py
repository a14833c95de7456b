"""
SQLite adapter

Manages the SQLite connection in WAL mode so the back office (writer)
and this service (reader) can share the file.

Note: amounts are stored as TEXT (Decimal strings) and timestamps as
fixed-width UTC strings (core.utils.timezone.DB_TS_FORMAT).
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

from core.constants import Paths
from core.types import AppMode

logger = logging.getLogger(__name__)


def get_db_path(mode: AppMode | str) -> Path:
    """Return the default database path of a mode

    Args:
        mode: application mode (PRODUCTION/DEMO)

    Returns:
        DB file path
    """
    if isinstance(mode, str):
        mode = AppMode(mode.lower())

    if mode == AppMode.PRODUCTION:
        return Paths.PROD_DB
    return Paths.DEMO_DB


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """Open an SQLite connection

    Args:
        db_path: DB file path
        readonly: open in read-only URI mode

    Returns:
        aiosqlite connection
    """
    db_path_str = str(db_path)

    if readonly:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = await aiosqlite.connect(db_path_str)
        # the journal mode is persistent, readers inherit it
        await conn.execute("PRAGMA journal_mode=WAL")

    await conn.execute("PRAGMA busy_timeout=30000")
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.debug(f"SQLite connection opened: {db_path_str} (readonly={readonly})")

    return conn


class SQLiteAdapter:
    """SQLite adapter

    Thin async wrapper over one aiosqlite connection with a transaction
    context manager.

    Args:
        db_path: DB file path
        readonly: read-only connection (web queries)

    Usage:
    ```python
    async with SQLiteAdapter(db_path) as db:
        async with db.transaction():
            await db.execute("INSERT INTO ...")
    ```
    """

    def __init__(self, db_path: Path | str, readonly: bool = False):
        self.db_path = Path(db_path)
        self.readonly = readonly
        self._conn: aiosqlite.Connection | None = None

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    async def connect(self) -> None:
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.debug("SQLite connection closed")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        cursor = await self.execute(sql, parameters)
        try:
            return await cursor.fetchone()
        finally:
            await cursor.close()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        cursor = await self.execute(sql, parameters)
        try:
            return list(await cursor.fetchall())
        finally:
            await cursor.close()

    async def commit(self) -> None:
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        if self._conn is not None:
            await self._conn.rollback()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Transaction context manager

        Commits on success, rolls back and re-raises on error.
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        try:
            yield self._conn
            await self._conn.commit()
        except Exception:
            await self._conn.rollback()
            raise

    async def table_exists(self, table_name: str) -> bool:
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()


# Tables read by the journal (owned by the back office)
SCHEMA_STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS member (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        first_name  TEXT NOT NULL,
        last_name   TEXT NOT NULL,
        state       TEXT NOT NULL DEFAULT 'ACTIF',
        created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS client (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        first_name  TEXT NOT NULL,
        last_name   TEXT NOT NULL,
        created_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        name        TEXT NOT NULL,
        unit_price  TEXT NOT NULL DEFAULT '0',
        stock       INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS food_credit (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        member_id   INTEGER REFERENCES member(id),
        client_id   INTEGER REFERENCES client(id),
        ceiling     TEXT NOT NULL DEFAULT '0',
        remaining   TEXT NOT NULL DEFAULT '0',
        status      TEXT NOT NULL DEFAULT 'ACTIF'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS food_credit_sale (
        id              INTEGER PRIMARY KEY AUTOINCREMENT,
        food_credit_id  INTEGER REFERENCES food_credit(id),
        product_id      INTEGER NOT NULL REFERENCES product(id),
        quantity        INTEGER NOT NULL,
        unit_price      TEXT NOT NULL,
        created_at      TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS cotisation (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        member_id   INTEGER REFERENCES member(id),
        client_id   INTEGER REFERENCES client(id),
        amount      TEXT NOT NULL,
        period      TEXT NOT NULL,
        status      TEXT NOT NULL DEFAULT 'EN_ATTENTE',
        paid_at     TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tontine (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        name        TEXT NOT NULL,
        status      TEXT NOT NULL DEFAULT 'ACTIVE'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tontine_cycle (
        id                      INTEGER PRIMARY KEY AUTOINCREMENT,
        tontine_id              INTEGER NOT NULL REFERENCES tontine(id),
        cycle_number            INTEGER NOT NULL,
        pot_amount              TEXT NOT NULL DEFAULT '0',
        status                  TEXT NOT NULL DEFAULT 'EN_COURS',
        closed_at               TEXT,
        beneficiary_member_id   INTEGER REFERENCES member(id),
        beneficiary_client_id   INTEGER REFERENCES client(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS tontine_contribution (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        cycle_id    INTEGER NOT NULL REFERENCES tontine_cycle(id),
        amount      TEXT NOT NULL,
        status      TEXT NOT NULL DEFAULT 'EN_ATTENTE',
        paid_at     TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS credit (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        member_id   INTEGER REFERENCES member(id),
        client_id   INTEGER REFERENCES client(id),
        amount      TEXT NOT NULL,
        remaining   TEXT NOT NULL DEFAULT '0',
        status      TEXT NOT NULL DEFAULT 'EN_ATTENTE'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS credit_transaction (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        credit_id   INTEGER NOT NULL REFERENCES credit(id),
        type        TEXT NOT NULL,
        amount      TEXT NOT NULL,
        created_at  TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS stock_movement (
        id          INTEGER PRIMARY KEY AUTOINCREMENT,
        product_id  INTEGER NOT NULL REFERENCES product(id),
        type        TEXT NOT NULL,
        quantity    INTEGER NOT NULL,
        reason      TEXT,
        reference   TEXT NOT NULL,
        moved_at    TEXT NOT NULL
    )
    """,
    # Status / date indexes of the journal sources
    "CREATE INDEX IF NOT EXISTS ix_food_credit_sale_created ON food_credit_sale(created_at)",
    "CREATE INDEX IF NOT EXISTS ix_cotisation_status_paid ON cotisation(status, paid_at)",
    "CREATE INDEX IF NOT EXISTS ix_contribution_status_paid ON tontine_contribution(status, paid_at)",
    "CREATE INDEX IF NOT EXISTS ix_credit_tx_type_created ON credit_transaction(type, created_at)",
    "CREATE INDEX IF NOT EXISTS ix_stock_movement_type_moved ON stock_movement(type, moved_at)",
    "CREATE INDEX IF NOT EXISTS ix_tontine_cycle_status_closed ON tontine_cycle(status, closed_at)",
)


SCHEMA_TABLES: tuple[str, ...] = (
    "member",
    "client",
    "product",
    "food_credit",
    "food_credit_sale",
    "cotisation",
    "tontine",
    "tontine_cycle",
    "tontine_contribution",
    "credit",
    "credit_transaction",
    "stock_movement",
)


async def init_schema(adapter: SQLiteAdapter) -> list[str]:
    """Create the tables (idempotent)

    Args:
        adapter: connected, writable SQLiteAdapter

    Returns:
        names of the tables that did not exist before
    """
    created = [name for name in SCHEMA_TABLES if not await adapter.table_exists(name)]

    for statement in SCHEMA_STATEMENTS:
        await adapter.execute(statement)

    await adapter.commit()

    if created:
        logger.info(f"Schema initialized, created tables: {', '.join(created)}")
    else:
        logger.debug("Schema up to date")

    return created
