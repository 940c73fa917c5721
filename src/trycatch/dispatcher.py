"""Synchronous and asynchronous entry points.

Both entry points run one operation, classify what came back and hand the
outcome to exactly one callback. Neither lets an ``Exception`` escape: every
failure ends in ``on_error`` (or ``on_timeout``), or is dropped silently when
that handler is absent.

Known limitation: when ``async_`` times out, the wrapped awaitable is only
abandoned. Work that has no native cancellation keeps running in the
background and its result is thrown away. Set ``Config(cancel_on_timeout=True)``
to request a best-effort ``cancel()`` instead.
"""

from __future__ import annotations

import asyncio
from datetime import timedelta
import inspect
import logging
import math
from typing import TYPE_CHECKING, Any

from trycatch._abandon import abandon
from trycatch.callbacks import Callbacks, dispatch, invoke
from trycatch.config import Config
from trycatch.outcome import Error, classify, classify_failure

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from types import TracebackType

    from trycatch.outcome import Outcome

log = logging.getLogger(__name__)

_DEFAULT_CONFIG = Config()


def sync[T](
    operation: Callable[[], T],
    *,
    on_error: Callable[[BaseException, TracebackType | None], Any] | None = None,
    on_null: Callable[[], Any] | None = None,
    on_empty: Callable[[], Any] | None = None,
    on_success: Callable[[T], Any] | None = None,
    config: Config | None = None,
) -> None:
    """Run *operation* on the caller's stack and dispatch its outcome.

    Args:
        operation: Zero-argument callable, called exactly once.
        on_error: Receives ``(exception, traceback)`` when *operation* raises.
        on_null: Called when *operation* returns ``None``.
        on_empty: Called when *operation* returns a list, tuple, deque or mapping.
        on_success: Receives any other return value.
        config: Optional settings; only ``strict_empty`` applies here.

    Example:
        sync(lambda: int("42"), on_success=print, on_error=report)
    """
    cfg = config or _DEFAULT_CONFIG
    callbacks = Callbacks(
        on_error=on_error, on_null=on_null, on_empty=on_empty, on_success=on_success
    )
    try:
        value = operation()
    except Exception as exc:
        outcome: Outcome[T] = classify_failure(exc, timeout_aware=False)
    else:
        outcome = classify(value, strict_empty=cfg.strict_empty)

    log.debug("sync outcome: %s", outcome.kind)
    dispatch(outcome, callbacks)


async def async_[T](
    future: Awaitable[T],
    *,
    on_timeout: Callable[[], Any] | None = None,
    on_error: Callable[[BaseException, TracebackType | None], Any] | None = None,
    on_waiting: Callable[[], Any] | None = None,
    on_null: Callable[[], Any] | None = None,
    on_empty: Callable[[], Any] | None = None,
    on_success: Callable[[T], Any] | None = None,
    timeout: float | timedelta | None = None,
    config: Config | None = None,
) -> None:
    """Await *future* under a time bound and dispatch its outcome.

    ``on_waiting`` fires before the wait begins. If *future* has not settled
    within *timeout* (seconds or a ``timedelta``; defaults to
    ``config.timeout_s``, 10 seconds), ``on_timeout`` fires and the awaitable
    is abandoned. A ``TimeoutError`` raised by *future* itself also counts as a
    timeout. The returned coroutine always completes normally.

    Example:
        await async_(fetch_user(uid), on_success=render, on_null=not_found, timeout=2)
    """
    cfg = config or _DEFAULT_CONFIG
    callbacks = Callbacks(
        on_timeout=on_timeout,
        on_error=on_error,
        on_waiting=on_waiting,
        on_null=on_null,
        on_empty=on_empty,
        on_success=on_success,
    )
    if callbacks.on_waiting is not None:
        invoke(callbacks.on_waiting, name="on_waiting")

    outcome = await _settle(future, timeout, cfg)
    log.debug("async outcome: %s", outcome.kind)
    dispatch(outcome, callbacks)


async def _settle[T](
    future: Awaitable[T], timeout: float | timedelta | None, cfg: Config
) -> Outcome[T]:
    try:
        bound = _resolve_timeout(timeout, cfg)
        task = asyncio.ensure_future(future)
    except (TypeError, ValueError) as exc:
        if inspect.iscoroutine(future):
            future.close()
        return Error(exc, exc.__traceback__)

    try:
        # shield: expiry stops the wait, not the work.
        value = await asyncio.wait_for(asyncio.shield(task), bound)
    except asyncio.CancelledError as exc:
        current = asyncio.current_task()
        if task.cancelled() and (current is None or current.cancelling() == 0):
            return Error(exc, exc.__traceback__)
        abandon(task)
        raise
    except Exception as exc:
        if not task.done():
            log.debug("Awaitable did not settle within %.3fs; abandoning", bound)
            abandon(task, cancel=cfg.cancel_on_timeout)
        return classify_failure(exc)
    return classify(value, strict_empty=cfg.strict_empty)


def _resolve_timeout(timeout: float | timedelta | None, cfg: Config) -> float:
    if timeout is None:
        return cfg.timeout_s
    if isinstance(timeout, timedelta):
        seconds = timeout.total_seconds()
    elif isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise TypeError(
            f"timeout must be seconds or a timedelta, got {type(timeout).__name__}"
        )
    else:
        try:
            seconds = float(timeout)
        except OverflowError as exc:
            raise ValueError(f"timeout is too large: {timeout!r}") from exc
    if not math.isfinite(seconds):
        raise ValueError(f"timeout must be finite, got {timeout!r}")
    return seconds


class TryCatch:
    """Entry points bound to one Config.

    Example:
        guard = TryCatch(Config(timeout_s=2.0, strict_empty=True))
        await guard.async_(load(), on_success=show, on_timeout=retry_later)
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or _DEFAULT_CONFIG

    def sync[T](
        self,
        operation: Callable[[], T],
        *,
        on_error: Callable[[BaseException, TracebackType | None], Any] | None = None,
        on_null: Callable[[], Any] | None = None,
        on_empty: Callable[[], Any] | None = None,
        on_success: Callable[[T], Any] | None = None,
    ) -> None:
        """Same as :func:`sync` with this instance's config."""
        sync(
            operation,
            on_error=on_error,
            on_null=on_null,
            on_empty=on_empty,
            on_success=on_success,
            config=self.config,
        )

    async def async_[T](
        self,
        future: Awaitable[T],
        *,
        on_timeout: Callable[[], Any] | None = None,
        on_error: Callable[[BaseException, TracebackType | None], Any] | None = None,
        on_waiting: Callable[[], Any] | None = None,
        on_null: Callable[[], Any] | None = None,
        on_empty: Callable[[], Any] | None = None,
        on_success: Callable[[T], Any] | None = None,
        timeout: float | timedelta | None = None,
    ) -> None:
        """Same as :func:`async_` with this instance's config."""
        await async_(
            future,
            on_timeout=on_timeout,
            on_error=on_error,
            on_waiting=on_waiting,
            on_null=on_null,
            on_empty=on_empty,
            on_success=on_success,
            timeout=timeout,
            config=self.config,
        )

    def __repr__(self) -> str:
        return f"TryCatch({self.config!r})"
