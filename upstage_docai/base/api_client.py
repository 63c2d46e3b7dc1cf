"""Shared base class for the document-AI REST clients.

Purpose:
    Hold credentials, base URL and logger for one client, and run a single
    authenticated JSON request with uniform logging and error mapping. The
    concrete clients only build request bodies and reshape responses.

External dependencies:
    ``httpx`` via the pooled clients in :mod:`upstage_docai.base.http`, or a
    caller-supplied ``httpx.Client`` (tests inject ``httpx.MockTransport``).

Failure semantics:
    - transport failures become :class:`DocAIError` with a classified code;
    - non-2xx responses become :class:`DocAIError` carrying the status code and
      the server's error message;
    - nothing is retried here.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Mapping, Optional

import httpx

from ..config import get_config
from ..config.defaults import DOCAI_DEFAULT_BASE_URL
from .errors import DocAIError, ErrorCode
from .http import build_headers, ensure_success, get_httpx_client, read_json, transport_error
from .logging import LogContext, get_logger, normalized_log_event


class BaseApiClient:
    """Credentials, transport and request helper shared by all clients.

    Parameters:
        api_key: Explicit key; otherwise resolved by :func:`get_config`.
        base_url: API root; otherwise from configuration
            (default ``https://api.upstage.ai/v1``).
        http_client: Optional ``httpx.Client`` used instead of the pool. Its
            own ``base_url`` is ignored; absolute URLs are always sent.
        logger: Optional logger; defaults to ``docai.<service>``.
        config: Pre-merged configuration mapping; skips :func:`get_config`.
    """

    service_name = "base"

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
        config: Optional[Mapping[str, Any]] = None,
    ) -> None:
        cfg = dict(config) if config is not None else get_config()
        self._config = cfg
        self._api_key = api_key or cfg.get("api_key")
        self._base_url = (base_url or cfg.get("base_url") or DOCAI_DEFAULT_BASE_URL).rstrip("/")
        self._http_client = http_client
        self._logger = logger or get_logger(f"docai.{self.service_name}")

    @property
    def base_url(self) -> str:
        return self._base_url

    def _url(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    def _client(self, stream: bool = False) -> httpx.Client:
        """Injected client, or the pooled one shared by every call of this service."""
        if self._http_client is not None:
            return self._http_client
        purpose = "stream" if stream else "api"
        return get_httpx_client(self._base_url, purpose=f"{self.service_name}.{purpose}")

    def _headers(self, accept: str = "application/json") -> Dict[str, str]:
        return build_headers(self._api_key, accept=accept)

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        ctx: Optional[LogContext] = None,
        **kwargs: Any,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        ``kwargs`` go straight to ``httpx.Client.request`` (``json=``,
        ``data=``, ``files=``, ``params=``).
        """
        ctx = ctx or LogContext(operation=operation)
        headers = self._headers()
        normalized_log_event(self._logger, "request.start", ctx, phase="start", method=method, path=path)
        t0 = time.perf_counter()
        try:
            resp = self._client().request(method, self._url(path), headers=headers, **kwargs)
        except httpx.HTTPError as e:
            err = transport_error(e, operation)
            self._log_failure(ctx, err, t0)
            raise err from e
        try:
            ensure_success(resp, operation)
            body = read_json(resp, operation)
        except DocAIError as err:
            self._log_failure(ctx, err, t0)
            raise
        normalized_log_event(
            self._logger,
            "request.end",
            ctx,
            phase="finalize",
            status_code=resp.status_code,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
        )
        return body

    def _log_failure(self, ctx: LogContext, err: DocAIError, t0: float) -> None:
        normalized_log_event(
            self._logger,
            "request.error",
            ctx,
            phase="finalize",
            error_code=err.code.value,
            status_code=err.status_code,
            error=err.message,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 2),
            level=logging.WARNING,
        )

    @staticmethod
    def _require(value: Any, message: str, operation: str) -> None:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise DocAIError(code=ErrorCode.VALIDATION, message=message, operation=operation)

    @staticmethod
    def _choice(value: str, allowed, field: str, operation: str) -> str:
        if value not in allowed:
            raise DocAIError(
                code=ErrorCode.VALIDATION,
                message=f"{field} must be one of {', '.join(allowed)}; got {value!r}",
                operation=operation,
            )
        return value


__all__ = ["BaseApiClient"]
