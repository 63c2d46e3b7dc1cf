"""Document chat client.

Files are uploaded once (``/document-chat/files``) and then referenced by id
in questions sent to ``/document-chat/responses``. Answers arrive either as
one response object (:meth:`DocumentChatClient.get_response`) or as an SSE
stream of deltas (:meth:`DocumentChatClient.stream_response`).

Streaming contract:
    ``stream_response`` validates its arguments eagerly and returns a lazy
    iterator; the HTTP request is sent on the first ``next()``. The iterator
    yields output deltas and ends with exactly one ``finish=True`` delta that
    carries the last usage and conversation id seen. Closing it early closes
    the underlying response.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Sequence, Union
from urllib.parse import quote

from ..base.api_client import BaseApiClient
from ..base.cancellation import CancellationToken
from ..base.errors import DocAIError, ErrorCode
from ..base.logging import LogContext
from ..base.models import BinaryInput, ChatDelta
from ..base.streaming import DeltaPolicy, iter_chat_deltas
from ..config.defaults import DOCUMENT_CHAT_DEFAULT_MODEL, DOCUMENT_CHAT_FILE_PURPOSE
from .helpers import build_response_body, normalize_file_ids, reasoning_block, shape_chat_result
from .stream_helpers import DocumentChatStreamingMixin

FILES_PATH = "/document-chat/files"
RESPONSES_PATH = "/document-chat/responses"

FileIds = Union[str, Sequence[str]]


class DocumentChatClient(DocumentChatStreamingMixin, BaseApiClient):
    """Client for document chat: file upload/retrieval and questions."""

    service_name = "document_chat"

    def _default_model(self) -> str:
        return self._config.get("chat_model") or DOCUMENT_CHAT_DEFAULT_MODEL

    def upload_file(self, file: Any, *, purpose: str = DOCUMENT_CHAT_FILE_PURPOSE) -> Any:
        """Upload ``file`` and return the service's file record (with ``id``).

        Parameters:
            file: :class:`BinaryInput`, raw bytes, or a file path. Unnamed
                bytes are sent as ``document``.
            purpose: Upload purpose form field.
        """
        operation = "document_chat_upload"
        try:
            binary = BinaryInput.coerce(file)
        except (TypeError, OSError) as e:
            raise DocAIError(code=ErrorCode.VALIDATION, message=f"invalid file: {e}", operation=operation, raw=e) from e
        ctx = LogContext(operation=operation, extra={"bytes": len(binary.data)})
        return self._request(
            "POST",
            FILES_PATH,
            operation=operation,
            ctx=ctx,
            data={"purpose": purpose},
            files={"file": binary.multipart("document")},
        )

    def retrieve_file(self, file_id: str, *, pages: Optional[str] = None, view: Optional[str] = None) -> Any:
        """Fetch metadata (and optionally page content) of an uploaded file."""
        operation = "document_chat_retrieve"
        self._require(file_id, "file_id is required", operation)
        params: Dict[str, str] = {}
        if pages:
            params["pages"] = pages
        if view:
            params["view"] = view
        ctx = LogContext(operation=operation, request_id=file_id)
        path = f"{FILES_PATH}/{quote(file_id.strip(), safe='')}"
        return self._request("GET", path, operation=operation, ctx=ctx, params=params or None)

    def _response_body(
        self,
        file_ids: FileIds,
        query: str,
        *,
        operation: str,
        stream: bool,
        model: Optional[str],
        conversation_id: Optional[str],
        reasoning_effort: Optional[str],
        reasoning_summary: Optional[str],
        temperature: Optional[float],
    ) -> Dict[str, Any]:
        ids = normalize_file_ids(file_ids, operation)
        self._require(query, "query is required", operation)
        return build_response_body(
            model=model or self._default_model(),
            file_ids=ids,
            query=query,
            stream=stream,
            conversation_id=conversation_id,
            reasoning=reasoning_block(reasoning_effort, reasoning_summary, operation),
            temperature=temperature,
        )

    def get_response(
        self,
        file_ids: FileIds,
        query: str,
        *,
        model: Optional[str] = None,
        conversation_id: Optional[str] = None,
        reasoning_effort: Optional[str] = None,
        reasoning_summary: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Ask ``query`` about the given files and wait for the whole answer.

        Returns:
            ``{"content", "conversation_id", "query", "usage", "full_response"}``;
            ``content`` is the first output message text or ``""``.

        Raises:
            DocAIError: no file ids, blank query, invalid reasoning options,
                transport failure or non-2xx status.
        """
        operation = "document_chat"
        body = self._response_body(
            file_ids, query, operation=operation, stream=False, model=model, conversation_id=conversation_id,
            reasoning_effort=reasoning_effort, reasoning_summary=reasoning_summary, temperature=temperature,
        )
        ctx = LogContext(operation=operation, model=body["model"], extra={"files": len(body["input"][0]["content"]) - 1})
        response = self._request("POST", RESPONSES_PATH, operation=operation, ctx=ctx, json=body)
        return shape_chat_result(response, query)

    def stream_response(
        self,
        file_ids: FileIds,
        query: str,
        *,
        model: Optional[str] = None,
        conversation_id: Optional[str] = None,
        reasoning_effort: Optional[str] = None,
        reasoning_summary: Optional[str] = None,
        temperature: Optional[float] = None,
        token: Optional[CancellationToken] = None,
        policy: Optional[DeltaPolicy] = None,
    ) -> Iterator[ChatDelta]:
        """Ask ``query`` and return an iterator of :class:`ChatDelta`.

        Parameters:
            token: Cancelling it ends the stream with a terminal
                ``cancelled:<reason>`` delta and closes the response.
            policy: Reasoning-summary handling (default: use reasoning text
                only when no output text arrives).

        Raises:
            DocAIError: argument validation, raised immediately.
            StreamTransportError: raised from the iterator on non-2xx status
                or read failure.
        """
        operation = "document_chat_stream"
        body = self._response_body(
            file_ids, query, operation=operation, stream=True, model=model, conversation_id=conversation_id,
            reasoning_effort=reasoning_effort, reasoning_summary=reasoning_summary, temperature=temperature,
        )
        self._headers()  # missing API key fails here, not on first next()
        ctx = LogContext(operation=operation, model=body["model"])
        chunks = self._stream_bytes(RESPONSES_PATH, body, operation=operation, ctx=ctx)
        return iter_chat_deltas(chunks, token=token, policy=policy, logger=self._logger, ctx=ctx, operation=operation)


__all__ = ["DocumentChatClient", "FILES_PATH", "RESPONSES_PATH"]
