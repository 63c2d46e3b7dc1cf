"""Shared HTTP client pool for the document-AI clients.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances keyed by
    ``(base_url, purpose)`` so repeated parse/extract/chat calls reuse
    connections. Timeouts come from :func:`get_timeout_config`.

Lifecycle & cleanup:
    All pooled clients are closed at interpreter exit via ``atexit``. Tests
    and long-running hosts may call :func:`close_all_clients` explicitly.

Injection:
    API clients accept an optional ``http_client``; when given it bypasses the
    pool entirely (tests pass clients built on ``httpx.MockTransport``).
"""

from __future__ import annotations

import atexit
import contextlib
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for ``base_url`` and ``purpose``.

    Parameters:
        base_url: API base URL set on the client so callers can use relative
            paths. ``None`` groups clients under a shared key.
        purpose: Short discriminator such as ``"parse"`` or ``"chat.stream"``.

    Returns:
        A reusable ``httpx.Client``. Creation is guarded by a re-entrant lock.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None and not client.is_closed:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None and not client.is_closed:
            return client
        timeout = get_timeout_config().to_httpx()
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def close_all_clients() -> None:
    """Close and forget every pooled client."""
    with _LOCK:
        for c in _CLIENTS.values():
            # close failures during teardown are not actionable
            with contextlib.suppress(Exception):  # nosec B110
                c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
