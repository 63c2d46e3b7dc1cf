"""Per-item batch runner.

Runs one operation over a sequence of items, pairing every result with the
index of the item that produced it. With ``continue_on_fail`` a failing
item yields an error record instead of aborting the batch.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..base.errors import DocAIError, ErrorCode, classify_exception
from ..base.logging import LogContext, get_logger, normalized_log_event

_logger = get_logger("docai.batch")


@dataclass
class ItemResult:
    """Output of one item.

    Attributes:
        json: Operation result, or the error record on failure.
        paired_item: Index of the input item.
        error: True when ``json`` is an error record.
    """

    json: Any
    paired_item: int
    error: bool = False


def error_record(exc: BaseException, operation_name: str) -> Dict[str, Any]:
    """``{"error", "error_code", "operation", "timestamp"}`` for a failed item."""
    if isinstance(exc, DocAIError):
        message, code = exc.message, exc.code
    else:
        message, code = str(exc) or exc.__class__.__name__, classify_exception(exc)
    return {
        "error": message,
        "error_code": code.value,
        "operation": operation_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def run_items(
    items: Iterable[Any],
    operation: Callable[[Any, int], Any],
    *,
    continue_on_fail: bool = False,
    operation_name: str = "batch",
    logger: Optional[logging.Logger] = None,
) -> List[ItemResult]:
    """Apply ``operation(item, index)`` to each item in order.

    Parameters:
        items: Inputs; consumed once.
        operation: Callable invoked with the item and its 0-based index.
        continue_on_fail: Record failures and keep going instead of raising.
        operation_name: Name stored in error records and logs.

    Returns:
        One :class:`ItemResult` per item, in input order.

    Raises:
        DocAIError: the first failure when ``continue_on_fail`` is false; the
            message names the item index and the original error is chained.
    """
    log = logger or _logger
    results: List[ItemResult] = []
    for index, item in enumerate(items):
        ctx = LogContext(operation=operation_name, item_index=index)
        try:
            value = operation(item, index)
        except Exception as e:
            record = error_record(e, operation_name)
            normalized_log_event(
                log,
                "batch.item_error",
                ctx,
                phase="finalize",
                error_code=record["error_code"],
                error=record["error"],
                level=logging.WARNING,
            )
            if not continue_on_fail:
                code = ErrorCode(record["error_code"])
                raise DocAIError(
                    code=code,
                    message=f"item {index}: {record['error']}",
                    operation=operation_name,
                    status_code=getattr(e, "status_code", None),
                    raw=e,
                ) from e
            results.append(ItemResult(json=record, paired_item=index, error=True))
            continue
        results.append(ItemResult(json=value, paired_item=index))
    normalized_log_event(
        log,
        "batch.end",
        LogContext(operation=operation_name),
        phase="finalize",
        items=len(results),
        failed=sum(1 for r in results if r.error),
    )
    return results


__all__ = ["ItemResult", "error_record", "run_items"]
