"""Stream reader contract tests.

Validates ``iter_chat_deltas``:
- output-text deltas take priority over reasoning-summary deltas;
- reasoning text surfaces only as a fallback (or live with ``separate``);
- exactly one terminal ``finish`` delta carrying usage and conversation id;
- cancellation and early close release the chunk source;
- read failures surface as ``StreamTransportError``.
"""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

import httpx
import pytest

from upstage_docai.base.cancellation import CancellationToken
from upstage_docai.base.errors import ErrorCode, MissingStreamBody, StreamTransportError
from upstage_docai.base.streaming import (
    OUTPUT_TEXT_DELTA,
    REASONING_SUMMARY_DELTA,
    DeltaPolicy,
    accumulate_deltas,
    iter_chat_deltas,
)


def _frame(obj) -> bytes:
    return f"data: {json.dumps(obj)}\n\n".encode("utf-8")


def _out(text: str) -> bytes:
    return _frame({"type": OUTPUT_TEXT_DELTA, "delta": text})


def _reason(text: str) -> bytes:
    return _frame({"type": REASONING_SUMMARY_DELTA, "delta": text})


class TrackingSource:
    """Chunk iterator recording reads and close calls; optionally fails on a read."""

    def __init__(self, chunks: Iterable[bytes], fail_at: Optional[int] = None, exc: Optional[Exception] = None):
        self._chunks = list(chunks)
        self._fail_at = fail_at
        self._exc = exc
        self.reads = 0
        self.closed = False

    def __iter__(self):
        return self

    def __next__(self) -> bytes:
        if self._fail_at is not None and self.reads == self._fail_at:
            self.reads += 1
            raise self._exc
        if self.reads >= len(self._chunks):
            raise StopIteration
        chunk = self._chunks[self.reads]
        self.reads += 1
        return chunk

    def close(self) -> None:
        self.closed = True


def _texts(deltas: List) -> List[str]:
    return [d.text for d in deltas if not d.finish]


def test_output_deltas_in_order_with_single_terminal():
    source = TrackingSource([_out("Hel"), _out("lo"), _frame({"type": "response.completed"})])
    deltas = list(iter_chat_deltas(source))
    assert _texts(deltas) == ["Hel", "lo"]  # nosec B101
    assert [d.finish for d in deltas].count(True) == 1 and deltas[-1].finish  # nosec B101
    assert deltas[-1].error is None  # nosec B101
    assert source.closed  # nosec B101


def test_reasoning_only_stream_falls_back_to_reasoning_text():
    source = TrackingSource([_reason("Thinking "), _reason("about it")])
    deltas = list(iter_chat_deltas(source))
    assert _texts(deltas) == ["Thinking ", "about it"]  # nosec B101
    assert all(d.kind == "output" for d in deltas)  # nosec B101


def test_output_text_suppresses_reasoning():
    source = TrackingSource([_reason("r1"), _out("A"), _reason("r2"), _out("B")])
    result = accumulate_deltas(iter_chat_deltas(source))
    assert result["text"] == "AB"  # nosec B101
    assert result["reasoning"] == ""  # nosec B101


def test_separate_policy_emits_reasoning_kind():
    source = TrackingSource([_reason("why"), _out("answer")])
    deltas = list(iter_chat_deltas(source, policy=DeltaPolicy(reasoning="separate")))
    assert [(d.kind, d.text) for d in deltas if not d.finish] == [("reasoning", "why"), ("output", "answer")]  # nosec B101


def test_ignore_policy_drops_reasoning():
    deltas = list(iter_chat_deltas(TrackingSource([_reason("why")]), policy=DeltaPolicy(reasoning="ignore")))
    assert _texts(deltas) == []  # nosec B101
    assert deltas[-1].finish  # nosec B101


def test_invalid_policy_rejected():
    with pytest.raises(ValueError):
        DeltaPolicy(reasoning="loud")


def test_consolidated_message_frame():
    frame = {"output": [{"type": "reasoning"}, {"type": "message", "content": [{"type": "output_text", "text": "Full"}]}]}
    deltas = list(iter_chat_deltas(TrackingSource([_frame(frame)])))
    assert _texts(deltas) == ["Full"]  # nosec B101


def test_consolidated_echo_after_deltas_is_ignored():
    echo = {"output": [{"type": "message", "content": [{"text": "AB"}]}]}
    deltas = list(iter_chat_deltas(TrackingSource([_out("A"), _out("B"), _frame(echo)])))
    assert _texts(deltas) == ["A", "B"]  # nosec B101


def test_deltas_repeating_an_earlier_consolidated_message_are_ignored():
    message = {"output": [{"type": "message", "content": [{"text": "Hello"}]}]}
    deltas = list(iter_chat_deltas(TrackingSource([_frame(message), _out("Hello")])))
    assert _texts(deltas) == ["Hello"]  # nosec B101


def test_completed_response_output_beats_reasoning_fallback():
    completed = {
        "type": "response.completed",
        "response": {"output": [{"type": "message", "content": [{"text": "Answer"}]}]},
    }
    deltas = list(iter_chat_deltas(TrackingSource([_reason("thinking"), _frame(completed)])))
    assert [(d.text, d.kind) for d in deltas if not d.finish] == [("Answer", "output")]  # nosec B101
    assert deltas[-1].finish  # nosec B101


def test_completed_response_output_after_deltas_is_not_repeated():
    completed = {
        "type": "response.completed",
        "response": {"output": [{"type": "message", "content": [{"text": "AB"}]}]},
    }
    deltas = list(iter_chat_deltas(TrackingSource([_out("A"), _out("B"), _frame(completed)])))
    assert _texts(deltas) == ["A", "B"]  # nosec B101


def test_terminal_carries_usage_and_conversation_id():
    completed = {
        "type": "response.completed",
        "response": {"usage": {"input_tokens": 3, "output_tokens": 5}, "conversation": {"id": "conv_1"}},
    }
    deltas = list(iter_chat_deltas(TrackingSource([_out("x"), _frame(completed)])))
    terminal = deltas[-1]
    assert terminal.finish  # nosec B101
    assert terminal.usage == {"prompt": 3, "completion": 5, "total": 8}  # nosec B101
    assert terminal.conversation_id == "conv_1"  # nosec B101


def test_malformed_frame_does_not_abort_stream():
    source = TrackingSource([_out("A"), b"data: {oops\n\n", _out("B")])
    assert _texts(list(iter_chat_deltas(source))) == ["A", "B"]  # nosec B101


def test_frame_split_across_chunks():
    raw = _out("split") + _out("ok")
    source = TrackingSource([raw[:7], raw[7:19], raw[19:]])
    assert _texts(list(iter_chat_deltas(source))) == ["split", "ok"]  # nosec B101


def test_unterminated_final_line_is_processed():
    source = TrackingSource([b'data: {"type": "response.output_text.delta", "delta": "end"}'])
    assert _texts(list(iter_chat_deltas(source))) == ["end"]  # nosec B101


def test_cancellation_mid_stream_stops_within_one_read(capture_logger):
    logger, handler = capture_logger
    token = CancellationToken()
    source = TrackingSource([_out("A"), _out("B"), _out("C")])
    gen = iter_chat_deltas(source, token=token, logger=logger)
    first = next(gen)
    assert first.text == "A"  # nosec B101
    token.cancel("user")
    rest = list(gen)
    assert len(rest) == 1 and rest[0].finish  # nosec B101
    assert rest[0].error == "cancelled:user"  # nosec B101
    assert source.reads == 1  # nosec B101
    assert source.closed  # nosec B101
    events = [e["event"] for e in handler.events()]
    assert "stream.cancelled" in events and "stream.end" not in events  # nosec B101


def test_cancelled_before_start_reads_nothing():
    token = CancellationToken()
    token.cancel()
    source = TrackingSource([_out("A")])
    deltas = list(iter_chat_deltas(source, token=token))
    assert len(deltas) == 1 and deltas[0].error == "cancelled:operation cancelled"  # nosec B101
    assert source.reads == 0 and source.closed  # nosec B101


def test_consumer_closing_early_closes_source():
    source = TrackingSource([_out("A"), _out("B")])
    gen = iter_chat_deltas(source)
    next(gen)
    gen.close()
    assert source.closed  # nosec B101


def test_read_error_raises_stream_transport_error():
    source = TrackingSource([_out("A")], fail_at=1, exc=httpx.ReadError("connection reset"))
    gen = iter_chat_deltas(source, operation="document_chat_stream")
    assert next(gen).text == "A"  # nosec B101
    with pytest.raises(StreamTransportError) as ei:
        next(gen)
    assert ei.value.code is ErrorCode.TRANSPORT  # nosec B101
    assert ei.value.operation == "document_chat_stream"  # nosec B101
    assert isinstance(ei.value.raw, httpx.ReadError)  # nosec B101
    assert source.closed  # nosec B101


def test_read_timeout_is_classified_as_timeout():
    source = TrackingSource([], fail_at=0, exc=httpx.ReadTimeout("slow"))
    with pytest.raises(StreamTransportError) as ei:
        list(iter_chat_deltas(source))
    assert ei.value.code is ErrorCode.TIMEOUT  # nosec B101


def test_missing_body_raises():
    with pytest.raises(MissingStreamBody):
        list(iter_chat_deltas(None))


def test_plain_generator_source_is_closed():
    state = {"closed": False}

    def chunks():
        try:
            yield _out("A")
            yield _out("B")
        finally:
            state["closed"] = True

    gen = iter_chat_deltas(chunks())
    next(gen)
    gen.close()
    assert state["closed"]  # nosec B101
