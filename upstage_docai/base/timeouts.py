"""Transport timeout configuration for the pooled HTTP clients.

Only transport-level timeouts live here; nothing in this package wraps an
operation in its own deadline or retries it. Callers who need that apply it
around the public client methods.

Environment variables (optional, positive floats):
    DOCAI_TIMEOUT_HTTP_SECONDS     read/write/pool timeout (default 120)
    DOCAI_TIMEOUT_CONNECT_SECONDS  connect timeout (default 10)

Document parsing of large PDFs is slow server-side, so the read default is
deliberately generous.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional, Tuple

import httpx

HTTP_TIMEOUT_ENV = "DOCAI_TIMEOUT_HTTP_SECONDS"
CONNECT_TIMEOUT_ENV = "DOCAI_TIMEOUT_CONNECT_SECONDS"


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds."""

    http_timeout_seconds: float = 120.0
    connect_timeout_seconds: float = 10.0

    def to_httpx(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)


_CACHED: Optional[TimeoutConfig] = None
_ENV_GUARD: Optional[Tuple[str, str]] = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float; anything else yields ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`.

    The cache is rebuilt when either environment variable changes, so tests
    can monkeypatch values without reaching into module state.
    """
    global _CACHED, _ENV_GUARD  # noqa: PLW0603
    guard = (os.getenv(HTTP_TIMEOUT_ENV, ""), os.getenv(CONNECT_TIMEOUT_ENV, ""))
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float(HTTP_TIMEOUT_ENV, defaults.http_timeout_seconds),
        connect_timeout_seconds=_parse_env_float(CONNECT_TIMEOUT_ENV, defaults.connect_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = [
    "TimeoutConfig",
    "get_timeout_config",
    "HTTP_TIMEOUT_ENV",
    "CONNECT_TIMEOUT_ENV",
]
