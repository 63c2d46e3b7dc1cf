"""Token usage normalisation.

Vendor responses report usage under several spellings depending on the
endpoint (chat-completions style, responses style, camelCase from some
gateways). This module folds them into :class:`TokenUsage`:

    prompt      <- input_tokens | prompt_tokens | promptTokens
    completion  <- output_tokens | completion_tokens | completionTokens
    total       <- total_tokens | totalTokens (sum of the two when absent)

Missing or malformed values count as zero. The helpers never raise, so they
are safe to call on every stream frame.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..models_parts.token_usage import TokenUsage

PROMPT_KEYS: Sequence[str] = ("input_tokens", "prompt_tokens", "promptTokens")
COMPLETION_KEYS: Sequence[str] = ("output_tokens", "completion_tokens", "completionTokens")
TOTAL_KEYS: Sequence[str] = ("total_tokens", "totalTokens")


def _coerce_int(value: Any) -> Optional[int]:
    """Return ``value`` as a non-negative int, or ``None``."""
    if value is None or isinstance(value, bool):
        return None
    try:
        iv = int(value)
    except (TypeError, ValueError):
        return None
    return iv if iv >= 0 else None


def _first(usage: Mapping[str, Any], keys: Sequence[str]) -> Optional[int]:
    for k in keys:
        v = _coerce_int(usage.get(k))
        if v is not None:
            return v
    return None


def find_usage(frame: Any) -> Optional[Mapping[str, Any]]:
    """Return the raw ``usage`` mapping of a frame or ``frame["response"]``."""
    if not isinstance(frame, Mapping):
        return None
    usage = frame.get("usage")
    if isinstance(usage, Mapping):
        return usage
    response = frame.get("response")
    if isinstance(response, Mapping) and isinstance(response.get("usage"), Mapping):
        return response["usage"]
    return None


def normalize_usage(usage: Any) -> TokenUsage:
    """Fold a vendor usage mapping into :class:`TokenUsage`.

    Parameters:
        usage: The ``usage`` mapping, or ``None``.

    Returns:
        TokenUsage with zeros for anything not reported.
    """
    if not isinstance(usage, Mapping):
        return TokenUsage()
    prompt = _first(usage, PROMPT_KEYS) or 0
    completion = _first(usage, COMPLETION_KEYS) or 0
    total = _first(usage, TOTAL_KEYS)
    if total is None:
        total = prompt + completion
    return TokenUsage(prompt=prompt, completion=completion, total=total)


def usage_dict(response: Any) -> Dict[str, int]:
    """Canonical usage mapping for a whole response body."""
    return normalize_usage(find_usage(response)).to_dict()


__all__ = [
    "find_usage",
    "normalize_usage",
    "usage_dict",
    "PROMPT_KEYS",
    "COMPLETION_KEYS",
    "TOTAL_KEYS",
]
