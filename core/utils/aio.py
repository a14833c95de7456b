"""
Asyncio helpers
"""

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """asyncio.gather that leaves nothing running behind a failure

    The first exception propagates as-is. Before it does, the other
    awaitables are cancelled and awaited, so none of them is still
    using a shared connection once the caller moves on.

    Args:
        *aws: coroutines or futures

    Returns:
        results in argument order
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        # retrieves every outcome, no "exception never retrieved" warning
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
