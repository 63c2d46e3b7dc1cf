"""Helpers for consuming a stream of :class:`ChatDelta` values."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from ..models import ChatDelta


def accumulate_deltas(deltas: Iterable[ChatDelta]) -> Dict[str, Any]:
    """Concatenate a delta stream into a single result.

    Output text is joined in arrival order; ``reasoning`` deltas (``separate``
    policy) are joined separately. Usage and conversation id come from the
    terminal element, falling back to the last value seen on any delta.

    Returns:
        ``{"text", "reasoning", "usage", "conversation_id", "error"}``.
    """
    text: List[str] = []
    reasoning: List[str] = []
    usage = None
    conversation_id = None
    error = None
    for d in deltas:
        if d.text:
            (reasoning if d.kind == "reasoning" else text).append(d.text)
        if d.usage is not None:
            usage = d.usage
        if d.conversation_id is not None:
            conversation_id = d.conversation_id
        if d.error is not None:
            error = d.error
    return {
        "text": "".join(text),
        "reasoning": "".join(reasoning),
        "usage": usage,
        "conversation_id": conversation_id,
        "error": error,
    }


__all__ = ["ChatDelta", "accumulate_deltas"]
