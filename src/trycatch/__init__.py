"""trycatch: dispatch one outcome callback around a single unit of work.

Public API:
    - sync(): Run a zero-argument callable and dispatch its outcome
    - async_(): Await an awaitable under a timeout and dispatch its outcome
    - TryCatch: Both entry points bound to a Config
    - classify() / classify_failure(): The pure outcome policy
    - Config: Configuration dataclass
"""

from __future__ import annotations

import logging

from trycatch.callbacks import Callbacks, dispatch
from trycatch.config import Config
from trycatch.dispatcher import TryCatch, async_, sync
from trycatch.errors import ConfigurationError, TryCatchError
from trycatch.outcome import (
    Empty,
    Error,
    Null,
    Outcome,
    Success,
    Timeout,
    classify,
    classify_failure,
)

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("trycatch")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("trycatch").addHandler(logging.NullHandler())

__all__ = [
    "Callbacks",
    "Config",
    "ConfigurationError",
    "Empty",
    "Error",
    "Null",
    "Outcome",
    "Success",
    "Timeout",
    "TryCatch",
    "TryCatchError",
    "async_",
    "classify",
    "classify_failure",
    "dispatch",
    "sync",
]
