"""
NaoLoad - Polling
=================

Fixed-interval polling for job-style upstream APIs.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional

from naoload.core.logger import logger
from .errors import BackendTimeout


async def poll_until(
    fetch: Callable[[int], Awaitable[Optional[Any]]],
    attempts: int,
    interval: float,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    label: str = "Upstream",
) -> Any:
    """
    Call ``fetch(attempt)`` until it returns something other than None.

    Sleeps ``interval`` seconds between attempts (not after the last one).
    ``fetch`` raises to abort early. Raises BackendTimeout after ``attempts``
    misses.
    """
    for attempt in range(attempts):
        result = await fetch(attempt)
        if result is not None:
            if attempt:
                logger.tree("Polling Finished", [
                    ("Backend", label),
                    ("Attempts", str(attempt + 1)),
                ], emoji="✅")
            return result

        if attempt < attempts - 1:
            await sleep(interval)

    logger.tree("Polling Timeout", [
        ("Backend", label),
        ("Attempts", str(attempts)),
        ("Interval", f"{interval}s"),
    ], emoji="⏳")
    raise BackendTimeout()


__all__ = ["poll_until"]
