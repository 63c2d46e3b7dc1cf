"""Streaming package: SSE decoding and chat delta extraction."""

from .delta_extraction import (
    DeltaPolicy,
    OUTPUT_TEXT_DELTA,
    REASONING_SUMMARY_DELTA,
    extract_conversation_id,
    extract_text,
    output_message_text,
)
from .sse_decoder import SSEChunkDecoder
from .stream_reader import iter_chat_deltas
from .streaming import ChatDelta, accumulate_deltas

__all__ = [
    "ChatDelta",
    "DeltaPolicy",
    "OUTPUT_TEXT_DELTA",
    "REASONING_SUMMARY_DELTA",
    "SSEChunkDecoder",
    "accumulate_deltas",
    "extract_conversation_id",
    "extract_text",
    "iter_chat_deltas",
    "output_message_text",
]
