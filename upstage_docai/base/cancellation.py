"""Cooperative cancellation primitives (public import path).

Implementations live under ``cancellation_parts``; import from here.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
