"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration and the callback
recorder. Fixtures here are autouse unless noted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
import os
from typing import Any

import pytest

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class Recorder:
    """Callback test double that records every handler call in order.

    Use ``all_callbacks()`` / ``sync_callbacks()`` as keyword arguments so each
    test observes every outcome, not only the one it expects.
    """

    calls: list[tuple[str, tuple[Any, ...]]] = field(default_factory=list)

    def on_timeout(self) -> None:
        self.calls.append(("timeout", ()))

    def on_error(self, cause: BaseException, trace: Any) -> None:
        self.calls.append(("error", (cause, trace)))

    def on_waiting(self) -> None:
        self.calls.append(("waiting", ()))

    def on_null(self) -> None:
        self.calls.append(("null", ()))

    def on_empty(self) -> None:
        self.calls.append(("empty", ()))

    def on_success(self, data: Any) -> None:
        self.calls.append(("success", (data,)))

    @property
    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def args_of(self, name: str) -> tuple[Any, ...]:
        matches = [args for n, args in self.calls if n == name]
        assert len(matches) == 1, f"expected one {name!r} call, got {self.names}"
        return matches[0]

    def sync_callbacks(self) -> dict[str, Any]:
        return {
            "on_error": self.on_error,
            "on_null": self.on_null,
            "on_empty": self.on_empty,
            "on_success": self.on_success,
        }

    def all_callbacks(self) -> dict[str, Any]:
        return {
            **self.sync_callbacks(),
            "on_timeout": self.on_timeout,
            "on_waiting": self.on_waiting,
        }


@pytest.fixture
def recorder() -> Recorder:
    """Return a fresh callback recorder (not autouse)."""
    return Recorder()


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    monkeypatch.setattr(
        "trycatch.config.load_dotenv", lambda *_args, **_kwargs: False
    )


@pytest.fixture(autouse=True)
def isolate_trycatch_env(request, monkeypatch):
    """Clear TRYCATCH_* env vars so configuration tests start clean.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("TRYCATCH_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy asyncio debug chatter."""
    logging.getLogger("asyncio").setLevel(logging.WARNING)
