"""upstage_docai.config.env
========================

Environment variable mapping and helpers for the API credential and the
per-setting overrides.

Design Notes
------------
- ``API_KEY_ENV_VARS`` lists acceptable credential variable names with the
  canonical name first to establish precedence.
- ``ENV_FIELD_MAP`` maps configuration keys to the environment variable that
  overrides them.
- Helpers never raise on unset variables; callers decide how to proceed.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Ordered credential variable names (canonical first)
API_KEY_ENV_VARS: Tuple[str, ...] = ("UPSTAGE_API_KEY", "DOCAI_API_KEY")

# Config key -> environment variable
ENV_FIELD_MAP: Dict[str, str] = {
    "base_url": "UPSTAGE_BASE_URL",
    "parse_model": "UPSTAGE_PARSE_MODEL",
    "extract_model": "UPSTAGE_EXTRACT_MODEL",
    "chat_model": "UPSTAGE_CHAT_MODEL",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and resilient to surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_api_key_candidates() -> Iterable[str]:
    """Yield acceptable credential environment variable names in priority order."""
    yield from API_KEY_ENV_VARS


def resolve_api_key() -> Tuple[Optional[str], Optional[str]]:
    """Resolve the API key from the process environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        value; ``(None, None)`` when nothing usable is set.
    """
    for name in get_api_key_candidates():
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


def env_overrides() -> Dict[str, str]:
    """Return configuration values set through ``ENV_FIELD_MAP`` variables."""
    out: Dict[str, str] = {}
    for field, var in ENV_FIELD_MAP.items():
        val = os.getenv(var)
        if val is not None and val.strip():
            out[field] = val.strip()
    return out


__all__ = [
    "API_KEY_ENV_VARS",
    "ENV_FIELD_MAP",
    "is_placeholder",
    "get_api_key_candidates",
    "resolve_api_key",
    "env_overrides",
]
