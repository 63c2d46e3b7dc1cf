"""
Chat message accepted by ``DocumentChatModel``.

Content is a plain string or a list of parts; parts are dicts with a
``text`` key (``{"type": "text", "text": ...}``) or bare strings.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Mapping, Union

Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class Message:
    """A role-tagged chat message."""

    role: Role
    content: Union[str, List[Any]]

    @classmethod
    def coerce(cls, value: Any) -> "Message":
        """Build a message from a string, a mapping or an existing message.

        Strings become user messages. Mappings need ``content``; ``role``
        defaults to ``user``.
        """
        if isinstance(value, Message):
            return value
        if isinstance(value, str):
            return cls(role="user", content=value)
        if isinstance(value, Mapping):
            return cls(role=value.get("role", "user"), content=value.get("content", ""))
        raise TypeError(f"unsupported message type: {type(value).__name__}")

    def text(self) -> str:
        """Return the string content, or the first text part of a part list."""
        if isinstance(self.content, str):
            return self.content
        for p in self.content:
            if isinstance(p, str):
                return p
            if isinstance(p, Mapping) and (p.get("type") == "text" or "text" in p):
                text = p.get("text")
                return text if isinstance(text, str) else ""
        return ""


__all__ = ["Message", "Role"]
