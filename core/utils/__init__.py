"""
Utility package

Timezone handling shared by the store and the journal, asyncio helpers
"""

from core.utils.aio import gather_or_cancel
from core.utils.timezone import (
    DB_TS_FORMAT,
    now_utc,
    ensure_utc,
    parse_iso_datetime,
    end_of_day,
    start_of_day,
    to_iso_z,
    to_db_ts,
    from_db_ts,
)

__all__ = [
    "gather_or_cancel",
    "DB_TS_FORMAT",
    "now_utc",
    "ensure_utc",
    "parse_iso_datetime",
    "end_of_day",
    "start_of_day",
    "to_iso_z",
    "to_db_ts",
    "from_db_ts",
]
