"""Configuration: frozen Config with an explicit, opt-in environment loader."""

from __future__ import annotations

from dataclasses import dataclass
import math
import os
from typing import TYPE_CHECKING, Any

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError

from trycatch.errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

DEFAULT_TIMEOUT_S = 10.0

ENV_PREFIX = "TRYCATCH_"


@dataclass(frozen=True)
class Config:
    """Immutable settings shared by the ``sync`` and ``async_`` entry points.

    The defaults reproduce the plain behavior: a 10 second wait bound, timed-out
    work is abandoned rather than cancelled, and any list or mapping result is
    reported as empty regardless of its length.

    Example:
        config = Config(timeout_s=2.5, strict_empty=True)
        await async_(fetch(), on_success=print, config=config)
    """

    timeout_s: float = DEFAULT_TIMEOUT_S
    #: Best-effort cancel of the wrapped awaitable when the wait times out.
    cancel_on_timeout: bool = False
    #: Only *empty* lists/mappings count as empty; non-empty ones succeed.
    strict_empty: bool = False

    def __post_init__(self) -> None:
        """Validate invariants so the dispatcher never has to."""
        if isinstance(self.timeout_s, bool) or not isinstance(
            self.timeout_s, (int, float)
        ):
            raise ConfigurationError(
                f"timeout_s must be a number, got {type(self.timeout_s).__name__}",
                hint="Pass the wait bound in seconds, e.g. Config(timeout_s=10.0).",
            )
        try:
            seconds = float(self.timeout_s)
        except OverflowError:
            seconds = math.inf
        if not math.isfinite(seconds) or seconds <= 0:
            raise ConfigurationError(
                f"timeout_s must be a finite number > 0, got {self.timeout_s!r}",
                hint="This bounds how long async_() waits before reporting a timeout.",
            )
        object.__setattr__(self, "timeout_s", seconds)

    @classmethod
    def from_env(cls, *, env_file: str | Path | None = None) -> Config:
        """Build a Config from ``TRYCATCH_*`` environment variables.

        A ``.env`` file (*env_file*, or the nearest one above the working
        directory) is loaded first without overriding variables that are
        already set. Recognized variables:

        - ``TRYCATCH_TIMEOUT_S``
        - ``TRYCATCH_CANCEL_ON_TIMEOUT``
        - ``TRYCATCH_STRICT_EMPTY``

        Unset variables keep their defaults.
        """
        path = env_file if env_file is not None else find_dotenv(usecwd=True)
        if path:
            load_dotenv(dotenv_path=path, override=False)
        values = _load_env()
        try:
            settings = _EnvSettings.model_validate(values)
        except ValidationError as exc:
            first = exc.errors()[0]
            field_name = str(first["loc"][0]) if first["loc"] else "?"
            env_key = f"{ENV_PREFIX}{field_name.upper()}"
            raise ConfigurationError(
                f"Invalid value for {env_key}: {values.get(field_name)!r}",
                hint=first["msg"],
            ) from exc
        return cls(**settings.model_dump())


class _EnvSettings(BaseModel):
    """Schema wall for raw environment strings."""

    timeout_s: float = Field(default=DEFAULT_TIMEOUT_S, gt=0, allow_inf_nan=False)
    cancel_on_timeout: bool = Field(default=False)
    strict_empty: bool = Field(default=False)

    model_config = {"extra": "forbid"}


def _load_env() -> dict[str, Any]:
    values: dict[str, Any] = {}
    for name in _EnvSettings.model_fields:
        raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
        if raw is not None:
            values[name] = raw.strip()
    return values
