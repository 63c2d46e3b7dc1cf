"""Cooperative cancellation token.

The token is the abort signal passed into streaming reads: the stream reader
polls ``cancelled`` before each network read and stops when it flips.
"""

from __future__ import annotations

from threading import Lock
from typing import List, Optional

from .cancelled_error import CancelledError


class CancellationToken:
    """Thread-safe cancellation flag with parent-to-child cascading.

    ``cancel`` may be called from any thread (e.g. a UI or signal handler)
    while a generator on another thread polls the token between reads.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._lock = Lock()
        self._children: List[CancellationToken] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str | None = None) -> None:
        """Request cancellation; idempotent, first reason wins."""
        with self._lock:
            if self._cancelled:
                return
            self._reason = reason
            self._cancelled = True
            children = list(self._children)
        for child in children:
            child.cancel(reason)

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` so that cancelling this token cancels it too."""
        with self._lock:
            self._children.append(token)
            already = self._cancelled
            reason = self._reason
        if already:
            token.cancel(reason)
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        """Raise :class:`CancelledError` when cancellation was requested."""
        if self._cancelled:
            raise CancelledError(self._reason or "operation cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
