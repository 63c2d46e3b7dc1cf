"""
Structured error exception type.

Wraps transport, HTTP and validation failures with a normalized `ErrorCode`
so callers (and the batch runner) can produce a useful per-item message
without inspecting library-specific exception classes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .error_code import ErrorCode


@dataclass(eq=False)
class DocAIError(Exception):
    """Represents a structured failure with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        operation: Operation name where the error originated (e.g. ``"parse"``).
        status_code: HTTP status code when the failure came from a response.
        retryable: Hint for caller-side retry policy (not acted on here).
        raw: Optional original exception for diagnostics.
    """

    code: ErrorCode
    message: str
    operation: Optional[str] = None
    status_code: Optional[int] = None
    retryable: bool = False
    raw: Optional[BaseException] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        where = self.operation or "-"
        status = f" [{self.status_code}]" if self.status_code is not None else ""
        return f"{where}{status} {self.code.value}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly summary (used for per-item failure records)."""
        return {
            "error": self.message,
            "error_code": self.code.value,
            "operation": self.operation,
            "status_code": self.status_code,
        }


__all__ = ["DocAIError"]
