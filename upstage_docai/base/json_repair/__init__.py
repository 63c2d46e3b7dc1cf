"""Defensive JSON parsing for structured-output request bodies."""

from .repair import (
    RESPONSE_FORMAT_KEYS,
    RepairOutcome,
    repair_json,
    repair_json_detailed,
)
from .response_format import build_response_format, parse_json_content, parse_response_format
from .stages import balance, cleanse, compress, fix_patterns

__all__ = [
    "RESPONSE_FORMAT_KEYS",
    "RepairOutcome",
    "repair_json",
    "repair_json_detailed",
    "parse_response_format",
    "build_response_format",
    "parse_json_content",
    "cleanse",
    "compress",
    "balance",
    "fix_patterns",
]
