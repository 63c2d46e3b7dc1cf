"""
Progressive JSON repair.

``repair_json`` tries the least invasive fix first and stops at the first
stage whose output parses into an acceptable value:

    cleanse -> direct -> compress -> balance -> pattern -> fallback

Compression also rewrites whitespace inside string values, so the balance
and pattern stages run on the cleansed text first and on the compressed text
only when that does not parse. When all of them fail, the caller gets the
*original, untouched* input string back and must decide what to do with it;
:func:`parse_response_format` does exactly that and raises
:class:`InvalidSchemaFormat`.

Each attempt is reported at DEBUG level as a ``repair.stage`` event with the
text length, brace/bracket counts and the decoder error position, which is
the only way to tell which heuristic fired on a given input.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Optional, Sequence, Tuple

from ..logging import get_logger, log_event
from .stages import balance, cleanse, compress, count_structure, fix_patterns

RESPONSE_FORMAT_KEYS: Tuple[str, ...] = ("type", "json_schema")

STAGE_DIRECT = "direct"
STAGE_COMPRESS = "compress"
STAGE_BALANCE = "balance"
STAGE_PATTERN = "pattern"
STAGE_FALLBACK = "fallback"

_FIXUPS: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    (STAGE_BALANCE, balance),
    (STAGE_PATTERN, fix_patterns),
)


@dataclass(frozen=True)
class RepairOutcome:
    """Result of :func:`repair_json_detailed`.

    Attributes:
        value: Parsed value on success; the original input string on fallback.
        stage: Name of the stage that produced ``value``.
        error: Last decoder/validation message when ``stage`` is ``fallback``.
        position: Character offset of the last decoder error, when known.
    """

    value: Any
    stage: str
    error: Optional[str] = None
    position: Optional[int] = None

    @property
    def repaired(self) -> bool:
        return self.stage not in (STAGE_DIRECT, STAGE_FALLBACK)

    @property
    def ok(self) -> bool:
        return self.stage != STAGE_FALLBACK


def _attempt(text: str, required: Sequence[str]) -> Tuple[Any, Optional[str], Optional[int]]:
    """Parse ``text``; returns ``(value, error, position)``, value ``None`` on failure."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        return None, e.msg, e.pos
    if required:
        if not isinstance(value, dict):
            return None, "top-level value is not an object", None
        missing = [k for k in required if k not in value]
        if missing:
            return None, f"missing required fields: {', '.join(missing)}", None
    return value, None, None


def _candidates(cleansed: str, compressed: str) -> Iterator[Tuple[str, str, str]]:
    """Yield ``(stage, basis, text)`` in the order they are tried."""
    yield STAGE_DIRECT, "cleansed", cleansed
    yield STAGE_COMPRESS, "compressed", compressed
    for stage, transform in _FIXUPS:
        yield stage, "cleansed", transform(cleansed)
        if compressed != cleansed:
            yield stage, "compressed", transform(compressed)


def repair_json_detailed(
    text: str,
    *,
    required: Sequence[str] = RESPONSE_FORMAT_KEYS,
    logger: Optional[logging.Logger] = None,
) -> RepairOutcome:
    """Run the repair pipeline and report which stage succeeded.

    Parameters:
        text: Possibly malformed JSON text.
        required: Keys that must be present on the parsed top-level object
            for a stage to count as successful. Pass ``()`` to accept any
            JSON value.
        logger: Diagnostics sink; defaults to ``docai.json_repair``.

    Returns:
        RepairOutcome. Deterministic for a given ``text``/``required`` pair.
    """
    log = logger or get_logger("docai.json_repair")
    cleansed = cleanse(text)
    compressed = compress(cleansed)
    error: Optional[str] = None
    position: Optional[int] = None
    for name, basis, candidate in _candidates(cleansed, compressed):
        value, error, position = _attempt(candidate, required)
        stats = count_structure(candidate)
        log_event(
            log,
            "repair.stage",
            level=logging.DEBUG,
            stage=name,
            basis=basis,
            ok=error is None,
            original_length=len(text),
            length=len(candidate),
            brace_delta=stats.brace_delta,
            bracket_delta=stats.bracket_delta,
            error=error,
            position=position,
        )
        if error is None:
            return RepairOutcome(value=value, stage=name)

    log_event(log, "repair.fallback", level=logging.DEBUG, original_length=len(text), error=error, position=position)
    return RepairOutcome(value=text, stage=STAGE_FALLBACK, error=error, position=position)


def repair_json(
    text: str,
    *,
    required: Sequence[str] = RESPONSE_FORMAT_KEYS,
    logger: Optional[logging.Logger] = None,
) -> Any:
    """Return the parsed value, or the original ``text`` when nothing worked.

    Callers receiving a ``str`` back must re-parse it themselves and handle
    the failure.
    """
    return repair_json_detailed(text, required=required, logger=logger).value


__all__ = [
    "RepairOutcome",
    "RESPONSE_FORMAT_KEYS",
    "STAGE_DIRECT",
    "STAGE_COMPRESS",
    "STAGE_BALANCE",
    "STAGE_PATTERN",
    "STAGE_FALLBACK",
    "repair_json",
    "repair_json_detailed",
]
