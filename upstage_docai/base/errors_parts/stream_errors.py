"""
Streaming error types.

``StreamTransportError`` and ``MissingStreamBody`` surface to callers.
``MalformedFrame`` is internal: the decoder builds one to describe a skipped
SSE line in its trace log and never raises it.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .docai_error import DocAIError
from .error_code import ErrorCode


class StreamTransportError(DocAIError):
    """The byte stream could not be read or the response status is a failure."""

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode = ErrorCode.TRANSPORT,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=code,
            message=message,
            operation=operation,
            status_code=status_code,
            retryable=code in (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.TRANSPORT),
            raw=raw,
        )


class MissingStreamBody(DocAIError):
    """A streaming call was requested but the response exposed no byte stream."""

    def __init__(self, message: str = "streaming response has no body", *, operation: Optional[str] = None) -> None:
        super().__init__(code=ErrorCode.INTERNAL, message=message, operation=operation)


class MalformedFrame(DocAIError):
    """A single SSE ``data:`` payload that failed JSON parsing.

    Attributes:
        line_number: 1-based index of the complete line within the stream.
        position: Character offset reported by the JSON decoder.
        payload: The (truncated) offending payload.
    """

    def __init__(
        self,
        message: str,
        *,
        line_number: int,
        position: Optional[int] = None,
        payload: str = "",
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(code=ErrorCode.DECODE, message=message, raw=raw)
        self.line_number = line_number
        self.position = position
        self.payload = payload[:200]

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(line_number=self.line_number, position=self.position, payload=self.payload)
        return data


__all__ = ["StreamTransportError", "MissingStreamBody", "MalformedFrame"]
