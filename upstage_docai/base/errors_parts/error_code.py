"""
Normalized error codes (taxonomy).

Defines the `ErrorCode` enumeration attached to every `DocAIError`. Values
are lowercase snake_case and appear verbatim in structured logs and in the
per-item failure records produced by the batch runner.
"""
from __future__ import annotations

from enum import Enum


class ErrorCode(str, Enum):
    """Enumerated normalized error codes representing failure categories."""

    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    TRANSIENT = "transient"
    TRANSPORT = "transport"
    VALIDATION = "validation"
    DECODE = "decode"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    SERVER_ERROR = "server_error"
    UNAVAILABLE = "unavailable"
    INTERNAL = "internal"
    UNKNOWN = "unknown"


__all__ = ["ErrorCode"]
