"""
Incremental element emitted by the document-chat stream reader.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

DeltaKind = Literal["output", "reasoning"]


@dataclass
class ChatDelta:
    """One text fragment or the terminal marker of a chat stream.

    Fields:
      text: fragment to append (empty on the terminal element)
      kind: ``"output"`` for user-visible text, ``"reasoning"`` for reasoning
        summary text surfaced under the ``separate`` policy
      usage: canonical token usage seen on the same frame (terminal: last seen)
      conversation_id: conversation id seen on the same frame (terminal: last seen)
      finish: True only on the terminal element
      error: set on a terminal element that ended early, e.g. ``cancelled:<reason>``
      raw: the decoded frame, for diagnostics
    """

    text: str = ""
    kind: DeltaKind = "output"
    usage: Optional[Dict[str, int]] = None
    conversation_id: Optional[str] = None
    finish: bool = False
    error: Optional[str] = None
    raw: Optional[Any] = None

    def is_error(self) -> bool:
        return self.error is not None


__all__ = ["ChatDelta", "DeltaKind"]
