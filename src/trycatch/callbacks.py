"""Callback record and single-outcome dispatch."""

from __future__ import annotations

from dataclasses import dataclass
import inspect
import logging
from typing import TYPE_CHECKING, Any

from trycatch.outcome import Empty, Error, Null, Success, Timeout

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from trycatch.outcome import Outcome

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Callbacks[T]:
    """Optional handlers, one per outcome plus the waiting signal.

    Every field may be None. An outcome whose handler is missing is swallowed
    without any observable effect.
    """

    on_timeout: Callable[[], Any] | None = None
    on_error: Callable[[BaseException, TracebackType | None], Any] | None = None
    on_waiting: Callable[[], Any] | None = None
    on_null: Callable[[], Any] | None = None
    on_empty: Callable[[], Any] | None = None
    on_success: Callable[[T], Any] | None = None


def dispatch[T](outcome: Outcome[T], callbacks: Callbacks[T]) -> None:
    """Invoke the one handler matching *outcome*, if present."""
    handler: Callable[..., Any] | None
    args: tuple[Any, ...] = ()
    match outcome:
        case Timeout():
            handler = callbacks.on_timeout
        case Error(cause=cause, trace=trace):
            handler = callbacks.on_error
            args = (cause, trace)
        case Null():
            handler = callbacks.on_null
        case Empty():
            handler = callbacks.on_empty
        case Success(value=value):
            handler = callbacks.on_success
            args = (value,)
        case _:  # pragma: no cover - Outcome is closed
            raise TypeError(f"Unknown outcome: {outcome!r}")

    if handler is None:
        log.debug("No on_%s handler; outcome dropped", outcome.kind)
        return
    invoke(handler, *args, name=f"on_{outcome.kind}")


def invoke(handler: Callable[..., Any], *args: Any, name: str) -> None:
    """Call a handler, logging and absorbing anything it raises."""
    try:
        result = handler(*args)
    except Exception as e:
        log.error("Callback '%s' failed: %s", name, e, exc_info=True)
        return
    if inspect.iscoroutine(result):
        # Handlers run synchronously; an un-awaited coroutine would only warn later.
        result.close()
        log.warning("Callback '%s' returned a coroutine; handlers must be synchronous", name)
