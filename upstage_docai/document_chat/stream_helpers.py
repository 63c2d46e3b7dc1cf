"""Streaming helpers for the document chat client.

Purpose:
    Open the ``POST /document-chat/responses`` event stream and expose its
    body as a plain iterator of byte chunks for :func:`iter_chat_deltas`.
    Status errors are raised before the first chunk; read errors surface from
    the iterator and are wrapped by the reader.

Notes:
    The HTTP request is only sent when the byte iterator is first advanced,
    so building a stream performs no I/O.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterator

from ..base.errors import MissingStreamBody, StreamTransportError
from ..base.http import status_error
from ..base.logging import LogContext, normalized_log_event

SSE_MEDIA_TYPE = "text/event-stream"


class DocumentChatStreamingMixin:
    """Mixin adding the raw byte stream used by ``stream_response``."""

    def _stream_bytes(self, path: str, body: Dict[str, Any], *, operation: str, ctx: LogContext) -> Iterator[bytes]:
        """Yield body chunks of a streaming response.

        A server that ignores ``stream: true`` and answers with one JSON
        object is re-emitted as a single ``data:`` line so the reader treats
        it as a consolidated frame.

        Raises:
            StreamTransportError: non-2xx status (body read for the message).
            MissingStreamBody: the response carries no readable stream.
        """
        headers = self._headers(accept=SSE_MEDIA_TYPE)
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", path=path)
        with self._client(stream=True).stream("POST", self._url(path), json=body, headers=headers) as resp:
            if not resp.is_success:
                resp.read()
                err = status_error(resp, operation)
                raise StreamTransportError(
                    err.message,
                    code=err.code,
                    operation=operation,
                    status_code=err.status_code,
                )
            if getattr(resp, "stream", None) is None:
                raise MissingStreamBody(operation=operation)
            content_type = resp.headers.get("content-type", "")
            if content_type.startswith("application/json"):
                resp.read()
                yield b"data: " + json.dumps(resp.json()).encode("utf-8") + b"\n\n"
                return
            yield from resp.iter_bytes()


__all__ = ["DocumentChatStreamingMixin", "SSE_MEDIA_TYPE"]
