"""Chat-model adapter over document chat.

``DocumentChatModel`` lets code that speaks "list of chat messages" talk to
document chat: the last message's text becomes the query, and the configured
file ids, conversation id and reasoning options are attached to every call.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence, Union

from ..base.cancellation import CancellationToken
from ..base.errors import DocAIError, ErrorCode
from ..base.models import ChatDelta, Message, TokenUsage
from ..base.streaming import DeltaPolicy, accumulate_deltas
from ..config.defaults import REASONING_DEFAULT_EFFORT, REASONING_DEFAULT_SUMMARY
from .client import DocumentChatClient
from .helpers import normalize_file_ids


class DocumentChatModel:
    """Message-list front end for :class:`DocumentChatClient`.

    Parameters:
        file_ids: Comma-separated string or list of uploaded file ids.
        client: Existing client; otherwise one is built from ``client_kwargs``.
        model: Chat model name; defaults to the client's configured model.
        conversation_id: Continue an existing conversation.
        reasoning_effort: ``low``, ``medium`` or ``high``.
        reasoning_summary: ``auto``, ``enabled`` or ``disabled``.
        temperature: Optional sampling temperature.
        streaming: When true, :meth:`invoke` consumes the stream internally.
        policy: Reasoning-summary handling for streamed answers.

    Raises:
        DocAIError: ``validation`` code when no file id is given.
    """

    def __init__(
        self,
        file_ids: Union[str, Sequence[str]],
        *,
        client: Optional[DocumentChatClient] = None,
        model: Optional[str] = None,
        conversation_id: Optional[str] = None,
        reasoning_effort: str = REASONING_DEFAULT_EFFORT,
        reasoning_summary: str = REASONING_DEFAULT_SUMMARY,
        temperature: Optional[float] = None,
        streaming: bool = False,
        policy: Optional[DeltaPolicy] = None,
        **client_kwargs: Any,
    ) -> None:
        self.file_ids = normalize_file_ids(file_ids, "document_chat_model")
        self.client = client or DocumentChatClient(**client_kwargs)
        self.model = model
        self.conversation_id = conversation_id or None
        self.reasoning_effort = reasoning_effort or REASONING_DEFAULT_EFFORT
        self.reasoning_summary = reasoning_summary or REASONING_DEFAULT_SUMMARY
        self.temperature = temperature
        self.streaming = streaming
        self.policy = policy or DeltaPolicy()

    @staticmethod
    def query_from_messages(messages: Union[str, Sequence[Any]]) -> str:
        """Text of the last message (string content or its first text part)."""
        if isinstance(messages, str):
            return messages
        items: List[Any] = list(messages)
        if not items:
            raise DocAIError(code=ErrorCode.VALIDATION, message="at least one message is required",
                             operation="document_chat_model")
        try:
            return Message.coerce(items[-1]).text()
        except TypeError as e:
            raise DocAIError(code=ErrorCode.VALIDATION, message=str(e), operation="document_chat_model", raw=e) from e

    def _call_options(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "conversation_id": self.conversation_id,
            "reasoning_effort": self.reasoning_effort,
            "reasoning_summary": self.reasoning_summary,
            "temperature": self.temperature,
        }

    def invoke(self, messages: Union[str, Sequence[Any]]) -> Dict[str, Any]:
        """Answer the last message; returns ``{"text", "usage", "conversation_id"}``."""
        if self.streaming:
            result = accumulate_deltas(self.stream(messages))
            if result["error"]:
                raise DocAIError(code=ErrorCode.CANCELLED, message=result["error"], operation="document_chat_model")
            return {
                "text": result["text"],
                "usage": result["usage"] or TokenUsage().to_dict(),
                "conversation_id": result["conversation_id"],
            }
        query = self.query_from_messages(messages)
        answer = self.client.get_response(self.file_ids, query, **self._call_options())
        return {
            "text": answer["content"],
            "usage": answer["usage"],
            "conversation_id": answer["conversation_id"],
        }

    def stream(
        self,
        messages: Union[str, Sequence[Any]],
        *,
        token: Optional[CancellationToken] = None,
    ) -> Iterator[ChatDelta]:
        """Stream the answer to the last message as :class:`ChatDelta` values."""
        query = self.query_from_messages(messages)
        return self.client.stream_response(
            self.file_ids, query, token=token, policy=self.policy, **self._call_options()
        )


__all__ = ["DocumentChatModel"]
