"""
Canonical token usage record.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict


@dataclass(frozen=True)
class TokenUsage:
    """Prompt, completion and total token counts (zero when unknown)."""

    prompt: int = 0
    completion: int = 0
    total: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


__all__ = ["TokenUsage"]
