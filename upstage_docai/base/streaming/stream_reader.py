"""Lazy reader turning a chat byte stream into :class:`ChatDelta` values.

``iter_chat_deltas`` drives an :class:`SSEChunkDecoder` over an iterable of
byte chunks and applies the :class:`DeltaPolicy` precedence rules. It is a
plain generator: suspension happens at each ``next()`` of the consumer, and
per-stream state lives only in the generator frame.

Lifecycle guarantees:
    - the cancellation token is polled before every read and before every
      emitted delta; once cancelled, a terminal ``cancelled:<reason>`` delta
      is yielded and nothing else;
    - the chunk source is closed on every exit path (normal end, cancellation,
      read failure, or the consumer closing/abandoning the generator);
    - read failures raise :class:`StreamTransportError`; malformed frames are
      only logged by the decoder.
"""
from __future__ import annotations

import logging
from contextlib import ExitStack, suppress
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import httpx

from ..cancellation import CancellationToken
from ..errors import ErrorCode, MissingStreamBody, StreamTransportError, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatDelta
from ..tokens import find_usage, normalize_usage
from .delta_extraction import (
    SOURCE_MESSAGE,
    SOURCE_OUTPUT,
    DeltaPolicy,
    extract_conversation_id,
    extract_text,
)
from .sse_decoder import SSEChunkDecoder

_READ_ERRORS = (httpx.HTTPError, httpx.StreamError, OSError)


class _StreamState:
    """Per-stream bookkeeping for delta precedence and terminal metadata."""

    def __init__(self, policy: DeltaPolicy) -> None:
        self.policy = policy
        self.output_seen = False
        self.message_emitted = False
        self.reasoning_buffer: List[str] = []
        self.usage: Optional[Dict[str, int]] = None
        self.conversation_id: Optional[str] = None
        self.emitted = 0

    def consume(self, frame: Mapping[str, Any]) -> List[ChatDelta]:
        raw_usage = find_usage(frame)
        usage = normalize_usage(raw_usage).to_dict() if raw_usage is not None else None
        conversation_id = extract_conversation_id(frame)
        if usage is not None:
            self.usage = usage
        if conversation_id is not None:
            self.conversation_id = conversation_id

        extracted = extract_text(frame)
        if extracted is None:
            return []
        if extracted.source in (SOURCE_OUTPUT, SOURCE_MESSAGE):
            if extracted.source == SOURCE_MESSAGE and self.output_seen:
                # consolidated echo of text already streamed
                return []
            if extracted.source == SOURCE_OUTPUT and self.message_emitted:
                # deltas repeating a consolidated message already emitted
                return []
            self.output_seen = True
            self.message_emitted = extracted.source == SOURCE_MESSAGE
            self.reasoning_buffer.clear()
            return [self._delta(extracted.text, "output", usage, conversation_id, frame)]
        mode = self.policy.reasoning
        if mode == "separate":
            return [self._delta(extracted.text, "reasoning", usage, conversation_id, frame)]
        if mode == "fallback" and not self.output_seen:
            self.reasoning_buffer.append(extracted.text)
        return []

    def drain_fallback(self) -> List[ChatDelta]:
        if self.output_seen or not self.reasoning_buffer:
            return []
        pending, self.reasoning_buffer = self.reasoning_buffer, []
        return [self._delta(text, "output", None, None, None) for text in pending]

    def terminal(self, error: Optional[str] = None) -> ChatDelta:
        return ChatDelta(finish=True, error=error, usage=self.usage, conversation_id=self.conversation_id)

    def _delta(self, text, kind, usage, conversation_id, frame) -> ChatDelta:
        self.emitted += 1
        return ChatDelta(text=text, kind=kind, usage=usage, conversation_id=conversation_id, raw=frame)


def _register_source_cleanup(source: Any, stack: ExitStack) -> None:
    close_fn = getattr(source, "close", None)
    if callable(close_fn):
        def _safe_close() -> None:
            with suppress(Exception):
                close_fn()

        stack.callback(_safe_close)


def iter_chat_deltas(
    chunks: Optional[Iterable[bytes]],
    *,
    token: Optional[CancellationToken] = None,
    policy: Optional[DeltaPolicy] = None,
    logger: Optional[logging.Logger] = None,
    ctx: Optional[LogContext] = None,
    operation: str = "chat_stream",
) -> Iterator[ChatDelta]:
    """Yield text deltas, then exactly one terminal ``ChatDelta(finish=True)``.

    Parameters:
        chunks: Byte chunks as delivered by the transport. If the object has
            ``close()`` it is called when the generator finishes.
        token: Abort signal, polled before each read and each emitted delta.
        policy: Reasoning-summary handling; defaults to ``DeltaPolicy()``.
        logger: Diagnostics sink; defaults to ``docai.streaming``.
        ctx: Log context attached to stream events.
        operation: Name recorded on raised errors.

    Raises:
        MissingStreamBody: ``chunks`` is ``None``.
        StreamTransportError: reading the next chunk failed.
    """
    if chunks is None:
        raise MissingStreamBody(operation=operation)
    log = logger or get_logger("docai.streaming")
    state = _StreamState(policy or DeltaPolicy())
    decoder = SSEChunkDecoder(logger=log, ctx=ctx)

    def _cancel_requested() -> bool:
        return token is not None and token.cancelled

    def _cancelled_terminal() -> ChatDelta:
        reason = (token.reason if token is not None else None) or "operation cancelled"
        normalized_log_event(
            log,
            "stream.cancelled",
            ctx,
            phase="finalize",
            operation=operation,
            error_code=ErrorCode.CANCELLED.value,
            tokens=state.usage,
            emitted=state.emitted,
        )
        return state.terminal(error=f"{ErrorCode.CANCELLED.value}:{reason}")

    with ExitStack() as stack:
        _register_source_cleanup(chunks, stack)
        source = iter(chunks)
        if source is not chunks:
            _register_source_cleanup(source, stack)

        while True:
            if _cancel_requested():
                yield _cancelled_terminal()
                return
            try:
                chunk = next(source)
            except StopIteration:
                break
            except _READ_ERRORS as e:
                normalized_log_event(
                    log,
                    "stream.error",
                    ctx,
                    phase="read",
                    operation=operation,
                    error_code=classify_exception(e).value,
                    emitted=state.emitted,
                    error=str(e),
                )
                raise StreamTransportError(
                    str(e) or e.__class__.__name__,
                    code=classify_exception(e),
                    operation=operation,
                    raw=e,
                ) from e
            for frame in decoder.feed(chunk):
                for delta in state.consume(frame):
                    if _cancel_requested():
                        yield _cancelled_terminal()
                        return
                    yield delta

        for frame in decoder.close():
            for delta in state.consume(frame):
                yield delta
        for delta in state.drain_fallback():
            yield delta

        normalized_log_event(
            log,
            "stream.end",
            ctx,
            phase="finalize",
            operation=operation,
            tokens=state.usage,
            emitted=state.emitted,
            malformed_frames=decoder.malformed_count,
            conversation_id=state.conversation_id,
        )
        yield state.terminal()


__all__ = ["iter_chat_deltas"]
