"""Delta extraction from decoded document-chat stream frames.

Recognised frame shapes, in precedence order:

1. ``{"type": "response.output_text.delta", "delta": "..."}``: answer text.
2. ``{"type": "response.reasoning_summary_text.delta", "delta": "..."}``:
   reasoning summary text, handled according to :class:`DeltaPolicy`.
3. A consolidated frame ``{"output": [{"type": "message", "content":
   [{"text": "..."}]}]}`` sent instead of deltas, either at the top level or
   nested under ``response`` (as on ``response.completed``).

The functions here never raise on unexpected shapes; they return ``None``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, NamedTuple, Optional

OUTPUT_TEXT_DELTA = "response.output_text.delta"
REASONING_SUMMARY_DELTA = "response.reasoning_summary_text.delta"

SOURCE_OUTPUT = "output"
SOURCE_REASONING = "reasoning"
SOURCE_MESSAGE = "message"

REASONING_MODES = ("fallback", "separate", "ignore")


@dataclass(frozen=True)
class DeltaPolicy:
    """How reasoning-summary deltas are surfaced.

    reasoning:
        ``fallback`` (default): buffered, and emitted as output text at the end
        of the stream only if no output text arrived. Discarded as soon as any
        output text is seen.
        ``separate``: emitted live as ``kind="reasoning"`` deltas.
        ``ignore``: dropped.
    """

    reasoning: str = "fallback"

    def __post_init__(self) -> None:
        if self.reasoning not in REASONING_MODES:
            raise ValueError(f"reasoning must be one of {REASONING_MODES}, got {self.reasoning!r}")


class ExtractedText(NamedTuple):
    text: str
    source: str


def _message_text(output: Any) -> Optional[str]:
    if not isinstance(output, list):
        return None
    for item in output:
        if not isinstance(item, Mapping) or item.get("type") != "message":
            continue
        content = item.get("content")
        if isinstance(content, list) and content and isinstance(content[0], Mapping):
            text = content[0].get("text")
            if isinstance(text, str):
                return text
    return None


def extract_text(frame: Mapping[str, Any]) -> Optional[ExtractedText]:
    """Return the text carried by ``frame`` and where it came from."""
    ftype = frame.get("type")
    delta = frame.get("delta")
    if ftype == OUTPUT_TEXT_DELTA and isinstance(delta, str) and delta:
        return ExtractedText(delta, SOURCE_OUTPUT)
    if ftype == REASONING_SUMMARY_DELTA and isinstance(delta, str) and delta:
        return ExtractedText(delta, SOURCE_REASONING)
    text = _message_text(frame.get("output"))
    if not text:
        response = frame.get("response")
        if isinstance(response, Mapping):
            text = _message_text(response.get("output"))
    if text:
        return ExtractedText(text, SOURCE_MESSAGE)
    return None


def extract_conversation_id(frame: Any) -> Optional[str]:
    """Find a conversation id on the frame or its nested ``response``."""
    if not isinstance(frame, Mapping):
        return None
    for holder in (frame, frame.get("response")):
        if not isinstance(holder, Mapping):
            continue
        conv = holder.get("conversation")
        if isinstance(conv, Mapping) and conv.get("id"):
            return str(conv["id"])
        if isinstance(conv, str) and conv:
            return conv
        if holder.get("conversation_id"):
            return str(holder["conversation_id"])
    return None


def output_message_text(response: Any) -> str:
    """Text of the first ``message`` output item of a non-streaming response."""
    if not isinstance(response, Mapping):
        return ""
    return _message_text(response.get("output")) or ""


__all__ = [
    "DeltaPolicy",
    "ExtractedText",
    "OUTPUT_TEXT_DELTA",
    "REASONING_SUMMARY_DELTA",
    "SOURCE_OUTPUT",
    "SOURCE_REASONING",
    "SOURCE_MESSAGE",
    "extract_text",
    "extract_conversation_id",
    "output_message_text",
]
