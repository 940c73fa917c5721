"""Outcome variants and the classification policy.

Every wrapped operation ends in exactly one of five outcomes. Classification
is a pure function of the produced value or the raised failure, so it can be
exercised without running anything.
"""

from __future__ import annotations

import collections
from collections.abc import Mapping
import dataclasses
import typing

if typing.TYPE_CHECKING:
    from types import TracebackType

T = typing.TypeVar("T")

# List-category containers. Strings and bytes are scalars here.
_LIST_TYPES: tuple[type, ...] = (list, tuple, collections.deque)


@dataclasses.dataclass(frozen=True, slots=True)
class Timeout:
    """The wait bound elapsed before the awaitable settled."""

    kind: typing.ClassVar[str] = "timeout"


@dataclasses.dataclass(frozen=True, slots=True)
class Error:
    """The operation raised; carries the exception and its traceback."""

    cause: BaseException
    trace: TracebackType | None

    kind: typing.ClassVar[str] = "error"


@dataclasses.dataclass(frozen=True, slots=True)
class Null:
    """The operation produced ``None``."""

    kind: typing.ClassVar[str] = "null"


@dataclasses.dataclass(frozen=True, slots=True)
class Empty:
    """The operation produced a list-category or map-category container."""

    kind: typing.ClassVar[str] = "empty"


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T]:
    """The operation produced a usable value."""

    value: T

    kind: typing.ClassVar[str] = "success"


Outcome = Timeout | Error | Null | Empty | Success[T]


def is_container(value: object) -> bool:
    """Return True for list-category or map-category values."""
    return isinstance(value, (*_LIST_TYPES, Mapping))


def classify(value: T, *, strict_empty: bool = False) -> Outcome[T]:
    """Map a produced value to its outcome.

    Containers are checked first and by category only: ``[1, 2, 3]`` is
    ``Empty`` just like ``[]``. With ``strict_empty`` a non-empty container is
    a ``Success`` instead.
    """
    if is_container(value):
        if strict_empty and len(value) > 0:  # type: ignore[arg-type]
            return Success(value)
        return Empty()
    if value is None:
        return Null()
    return Success(value)


def classify_failure(exc: BaseException, *, timeout_aware: bool = True) -> Timeout | Error:
    """Map a raised failure to its outcome.

    ``timeout_aware`` is False on the synchronous path, where there is no wait
    bound and a ``TimeoutError`` is an ordinary error.
    """
    if timeout_aware and isinstance(exc, TimeoutError):
        return Timeout()
    return Error(exc, exc.__traceback__)
