"""Request header and response status helpers shared by the API clients."""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..errors import DocAIError, ErrorCode, classify_exception
from ..errors_parts.classification import _HTTP_STATUS_MAP

_RETRYABLE = (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT, ErrorCode.TRANSPORT)


def build_headers(api_key: Optional[str], *, accept: str = "application/json") -> Dict[str, str]:
    """Return request headers with bearer authorization.

    Raises:
        DocAIError: ``auth`` code when ``api_key`` is empty.
    """
    if not api_key:
        raise DocAIError(code=ErrorCode.AUTH, message="missing API key (set UPSTAGE_API_KEY)")
    return {"Authorization": f"Bearer {api_key}", "Accept": accept}


def error_message_from_body(body: Any, fallback: str) -> str:
    """Pull a human-readable message out of a vendor error body.

    Understands ``{"error": {"message": ...}}``, ``{"error": "..."}`` and
    ``{"message": ...}``; anything else yields ``fallback``.
    """
    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict) and err.get("message"):
            return str(err["message"])
        if isinstance(err, str) and err:
            return err
        if body.get("message"):
            return str(body["message"])
        if body.get("detail"):
            return str(body["detail"])
    return fallback


def status_error(resp: httpx.Response, operation: str) -> DocAIError:
    """Build a :class:`DocAIError` describing a non-2xx ``resp``.

    The response body must already be read.
    """
    status = resp.status_code
    code = _HTTP_STATUS_MAP.get(status) or (ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN)
    try:
        body: Any = resp.json()
    except ValueError:
        body = resp.text
    fallback = (body if isinstance(body, str) and body else None) or resp.reason_phrase or f"HTTP {status}"
    return DocAIError(
        code=code,
        message=error_message_from_body(body, fallback),
        operation=operation,
        status_code=status,
        retryable=code in _RETRYABLE,
    )


def ensure_success(resp: httpx.Response, operation: str) -> None:
    """Raise :func:`status_error` for any non-2xx response."""
    if not resp.is_success:
        raise status_error(resp, operation)


def transport_error(exc: Exception, operation: str) -> DocAIError:
    """Wrap an ``httpx`` transport exception as :class:`DocAIError`."""
    code = classify_exception(exc)
    return DocAIError(
        code=code,
        message=str(exc) or exc.__class__.__name__,
        operation=operation,
        retryable=code in _RETRYABLE,
        raw=exc,
    )


def read_json(resp: httpx.Response, operation: str) -> Any:
    """Decode a successful response body as JSON.

    Raises:
        DocAIError: ``decode`` code when the body is not JSON.
    """
    try:
        return resp.json()
    except ValueError as e:
        raise DocAIError(
            code=ErrorCode.DECODE,
            message=f"response is not valid JSON: {e}",
            operation=operation,
            status_code=resp.status_code,
            raw=e,
        ) from e


__all__ = [
    "build_headers",
    "error_message_from_body",
    "status_error",
    "ensure_success",
    "transport_error",
    "read_json",
]
