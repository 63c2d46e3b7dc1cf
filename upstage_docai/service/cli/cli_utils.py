"""Utility helpers shared by the CLI handlers.

Functions
---------
- ``parse_verbosity(value)``: Map user strings and synonyms to a canonical
  logging level name.
- ``read_text_arg(value)``: Resolve ``@path`` and ``-`` (stdin) arguments.
- ``emit_json(obj)``: Print one JSON document to stdout.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Optional, TextIO


def parse_verbosity(value: str) -> Optional[str]:
    """Parse a user-provided verbosity string into a canonical level.

    Accepted values (case-insensitive):
    - Canonical: DEBUG, INFO, WARNING, ERROR, CRITICAL
    - Synonyms: verbose->DEBUG; low->INFO; med/medium/warn->WARNING;
      high/error/err/quiet->ERROR; critical/crit/silent->CRITICAL

    Returns
    -------
    Optional[str]
        Canonical upper-cased level, or ``None`` if invalid.
    """
    v = value.strip().lower()
    mapping = {
        "debug": "DEBUG",
        "verbose": "DEBUG",
        "info": "INFO",
        "low": "INFO",
        "warning": "WARNING",
        "warn": "WARNING",
        "medium": "WARNING",
        "med": "WARNING",
        "error": "ERROR",
        "err": "ERROR",
        "high": "ERROR",
        "quiet": "ERROR",
        "critical": "CRITICAL",
        "crit": "CRITICAL",
        "silent": "CRITICAL",
    }
    return mapping.get(v)


def read_text_arg(value: str, stdin: Optional[TextIO] = None) -> str:
    """Return ``value`` itself, the contents of ``@path``, or stdin for ``-``."""
    if value == "-":
        return (stdin or sys.stdin).read()
    if value.startswith("@"):
        return Path(value[1:]).read_text(encoding="utf-8")
    return value


def emit_json(obj: Any, stream: Optional[TextIO] = None) -> None:
    """Print ``obj`` as indented JSON; non-serialisable values use ``str``."""
    print(json.dumps(obj, indent=2, ensure_ascii=False, default=str), file=stream or sys.stdout)


__all__ = ["parse_verbosity", "read_text_arg", "emit_json"]
