"""Per-item batch runner: pairing, fail-fast and continue-on-fail."""
from __future__ import annotations

import pytest

from upstage_docai.base.errors import DocAIError, ErrorCode
from upstage_docai.service.batch import ItemResult, error_record, run_items


def _upper(item, index):
    if item == "bad":
        raise DocAIError(code=ErrorCode.NOT_FOUND, message="file missing", status_code=404)
    return {"value": item.upper(), "index": index}


def test_results_are_paired_in_order():
    results = run_items(["a", "b"], _upper)
    assert [r.paired_item for r in results] == [0, 1]  # nosec B101
    assert results[1] == ItemResult(json={"value": "B", "index": 1}, paired_item=1)  # nosec B101


def test_first_failure_aborts_with_item_index():
    calls = []

    def op(item, index):
        calls.append(index)
        return _upper(item, index)

    with pytest.raises(DocAIError) as ei:
        run_items(["a", "bad", "c"], op, operation_name="document_parse")
    err = ei.value
    assert err.message == "item 1: file missing"  # nosec B101
    assert err.code is ErrorCode.NOT_FOUND and err.status_code == 404  # nosec B101
    assert err.operation == "document_parse"  # nosec B101
    assert isinstance(err.__cause__, DocAIError)  # nosec B101
    assert calls == [0, 1]  # nosec B101


def test_continue_on_fail_records_errors(capture_logger):
    logger, handler = capture_logger
    results = run_items(["a", "bad", "c"], _upper, continue_on_fail=True, operation_name="upload", logger=logger)
    assert [r.error for r in results] == [False, True, False]  # nosec B101
    record = results[1].json
    assert record["error"] == "file missing" and record["error_code"] == "not_found"  # nosec B101
    assert record["operation"] == "upload" and record["timestamp"].endswith("+00:00")  # nosec B101
    events = handler.events()
    assert [e["event"] for e in events] == ["batch.item_error", "batch.end"]  # nosec B101
    assert events[0]["item_index"] == 1  # nosec B101
    assert events[-1]["items"] == 3 and events[-1]["failed"] == 1  # nosec B101


def test_plain_exceptions_are_classified():
    record = error_record(ValueError("invalid page range"), "document_chat_retrieve")
    assert record["error_code"] == "validation"  # nosec B101
    with pytest.raises(DocAIError) as ei:
        run_items([1], lambda item, i: 1 / 0)
    assert ei.value.code is ErrorCode.UNKNOWN  # nosec B101
    assert ei.value.message == "item 0: division by zero"  # nosec B101


def test_empty_batch():
    assert run_items([], _upper) == []  # nosec B101
