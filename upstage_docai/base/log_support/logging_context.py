"""Structured logging context carried through one API operation."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Common fields attached to every event of one operation.

    ``operation`` is the client call (``document_parse``, ``chat_stream``...),
    ``request_id`` the async parse id or chat conversation id when known.
    """

    operation: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    item_index: Optional[int] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
