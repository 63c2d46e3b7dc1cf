"""Unified configuration layer.

Goals
-----
* Centralize defaults (base URL, models).
* Merge sources in a predictable order:
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) pointed to by DOCAI_CONFIG_FILE
    3. Environment variables (e.g. UPSTAGE_API_KEY, UPSTAGE_BASE_URL)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_config()``.

External Config File (Optional)
-------------------------------
If DOCAI_CONFIG_FILE is set to a path, we attempt to load JSON first and
fall back to YAML. Structure example:

```
base_url: https://api.upstage.ai/v1
chat_model: turbo
api_key: up_xxx
```

Public API
----------
* get_config(overrides: dict | None = None) -> dict
* reset_config_cache() -> None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    DOCAI_DEFAULT_BASE_URL,
    DOCUMENT_CHAT_DEFAULT_MODEL,
    DOCUMENT_PARSE_DEFAULT_MODEL,
    INFORMATION_EXTRACT_DEFAULT_MODEL,
)
from .env import env_overrides, is_placeholder, resolve_api_key


DEFAULTS: Dict[str, Any] = {
    "base_url": DOCAI_DEFAULT_BASE_URL,
    "parse_model": DOCUMENT_PARSE_DEFAULT_MODEL,
    "extract_model": INFORMATION_EXTRACT_DEFAULT_MODEL,
    "chat_model": DOCUMENT_CHAT_DEFAULT_MODEL,
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("DOCAI_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    data: Any
    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    if not isinstance(data, dict):
        data = {}
    _FILE_CACHE = data
    return data


def reset_config_cache() -> None:
    """Forget cached file/.env state so the next ``get_config`` re-reads it."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def get_config(overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return the merged client configuration.

    Merge order (later wins): defaults -> external config -> env vars -> overrides
    """
    _load_dotenv_once()
    cfg: Dict[str, Any] = dict(DEFAULTS)

    file_cfg = _load_external_config()
    cfg |= {k: v for k, v in file_cfg.items() if v is not None}

    cfg |= env_overrides()
    key, _ = resolve_api_key()
    if key:
        cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if isinstance(cfg.get("base_url"), str):
        cfg["base_url"] = cfg["base_url"].rstrip("/")
    return cfg


__all__ = [
    "DEFAULTS",
    "get_config",
    "reset_config_cache",
]
