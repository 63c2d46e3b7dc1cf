"""
Individual text transforms used by the JSON repair pipeline.

Every function here is pure: ``str -> str`` (or a small stats tuple) with no
logging and no parsing. Ordering and parse attempts live in ``repair.py``.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Tuple

_ZERO_WIDTH = re.compile(r"[\u200b-\u200d\ufeff]")
_WS_RUN = re.compile(r"\s+")
_WS_BEFORE_STRUCT = re.compile(r'\s*([{}\[\]":,])')
_WS_AFTER_STRUCT = re.compile(r'([{}\[\]":,])\s*')
_BRACE_RUN = re.compile(r"\}{3,}")
# "properties": with its value cut off before the next separator or the end
_TRUNCATED_PROPERTIES = re.compile(r'"properties"\s*:\s*(?=[,}\]]|$)')

_OPENERS = {"{": "}", "[": "]"}
_CLOSERS = {"}": "{", "]": "["}


@dataclass(frozen=True)
class BalanceStats:
    """Raw counts of structural characters (string contents included)."""

    open_braces: int
    close_braces: int
    open_brackets: int
    close_brackets: int

    @property
    def brace_delta(self) -> int:
        return self.open_braces - self.close_braces

    @property
    def bracket_delta(self) -> int:
        return self.open_brackets - self.close_brackets


def cleanse(text: str) -> str:
    """Strip, drop zero-width characters and the BOM, normalise line endings."""
    text = _ZERO_WIDTH.sub("", text).strip()
    return text.replace("\r\n", "\n").replace("\r", "\n")


def compress(text: str) -> str:
    """Remove newlines, collapse whitespace, and tighten around structural characters."""
    text = text.replace("\n", "")
    text = _WS_RUN.sub(" ", text)
    text = _WS_BEFORE_STRUCT.sub(r"\1", text)
    text = _WS_AFTER_STRUCT.sub(r"\1", text)
    return text.strip()


def count_structure(text: str) -> BalanceStats:
    return BalanceStats(
        open_braces=text.count("{"),
        close_braces=text.count("}"),
        open_brackets=text.count("["),
        close_brackets=text.count("]"),
    )


def _scan(text: str) -> Tuple[List[str], int, int]:
    """Walk ``text`` outside string literals.

    Returns the stack of unclosed openers and the number of unmatched ``}``
    and ``]`` closers.
    """
    stack: List[str] = []
    extra_braces = extra_brackets = 0
    in_string = escaped = False
    for ch in text:
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS:
            if stack and stack[-1] == _CLOSERS[ch]:
                stack.pop()
            elif ch == "}":
                extra_braces += 1
            else:
                extra_brackets += 1
    return stack, extra_braces, extra_brackets


def _strip_tail_closers(text: str, extra_braces: int, extra_brackets: int) -> str:
    """Remove up to the given numbers of ``}``/``]`` from the trailing run of closers."""
    chars = list(text.rstrip())
    i = len(chars) - 1
    while i >= 0 and (extra_braces or extra_brackets):
        ch = chars[i]
        if ch == "}" and extra_braces:
            del chars[i]
            extra_braces -= 1
        elif ch == "]" and extra_brackets:
            del chars[i]
            extra_brackets -= 1
        elif ch.isspace() or ch in "}]":
            pass
        else:
            break
        i -= 1
    return "".join(chars)


def balance(text: str) -> str:
    """Match closers to openers by trimming excess from the tail and appending missing ones.

    Excess closers are removed only from the trailing run of ``}``/``]``.
    Missing closers are appended in nesting order.
    """
    _, extra_braces, extra_brackets = _scan(text)
    if extra_braces or extra_brackets:
        text = _strip_tail_closers(text, extra_braces, extra_brackets)
    stack, _, _ = _scan(text)
    if stack:
        text = text.rstrip() + "".join(_OPENERS[o] for o in reversed(stack))
    return text


def fix_patterns(text: str) -> str:
    """Apply targeted fixes for known malformations, then rebalance.

    - runs of three or more ``}`` collapse to exactly ``}}``
    - a ``"properties":`` key whose value was cut off becomes ``{}``
    """
    text = _BRACE_RUN.sub("}}", text)
    text = _TRUNCATED_PROPERTIES.sub('"properties":{}', text)
    return balance(text)


__all__ = [
    "BalanceStats",
    "cleanse",
    "compress",
    "count_structure",
    "balance",
    "fix_patterns",
]
