"""Bookkeeping for awaitables left behind after a timeout.

A timed-out awaitable keeps running unless it is cancelled. Holding a strong
reference keeps the event loop from garbage-collecting a pending task, and the
done callback retrieves its exception so asyncio never reports it as
unhandled. The result itself is discarded.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

log = logging.getLogger(__name__)

_pending: set[asyncio.Future[Any]] = set()


def consume_future_exception(fut: asyncio.Future[Any]) -> None:
    """Avoid 'Future exception was never retrieved' for abandoned futures."""
    _pending.discard(fut)
    if fut.cancelled():
        log.debug("Abandoned awaitable was cancelled")
        return
    exc = fut.exception()
    if exc is not None:
        log.debug("Abandoned awaitable failed after its wait ended: %r", exc)


def abandon(fut: asyncio.Future[Any], *, cancel: bool = False) -> None:
    """Stop caring about *fut*; optionally request best-effort cancellation."""
    if fut.done():
        consume_future_exception(fut)
        return
    _pending.add(fut)
    fut.add_done_callback(consume_future_exception)
    if cancel:
        fut.cancel()


def pending_count() -> int:
    """Number of abandoned awaitables that have not settled yet."""
    return len(_pending)
