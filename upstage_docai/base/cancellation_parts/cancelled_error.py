"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised by blocking calls that observe a cancelled token.

    Streaming reads do not raise it; they end with a terminal
    ``cancelled:<reason>`` delta instead.
    """


__all__ = ["CancelledError"]
