from __future__ import annotations

import types

import httpx
import pytest

from upstage_docai.base.errors import (
    DocAIError,
    ErrorCode,
    InvalidSchemaFormat,
    MissingStreamBody,
    StreamTransportError,
    classify_exception,
)


def test_classify_docai_error_passthrough():
    e = DocAIError(code=ErrorCode.AUTH, message="nope", operation="document_parse")
    assert classify_exception(e) is ErrorCode.AUTH  # nosec B101 - assert is appropriate in unit tests


@pytest.mark.parametrize(
    "status,code",
    [
        (400, ErrorCode.VALIDATION),
        (401, ErrorCode.AUTH),
        (403, ErrorCode.AUTH),
        (404, ErrorCode.NOT_FOUND),
        (408, ErrorCode.TIMEOUT),
        (409, ErrorCode.CONFLICT),
        (422, ErrorCode.VALIDATION),
        (429, ErrorCode.RATE_LIMIT),
        (500, ErrorCode.SERVER_ERROR),
        (502, ErrorCode.TRANSIENT),
        (503, ErrorCode.UNAVAILABLE),
        (504, ErrorCode.TIMEOUT),
        (507, ErrorCode.SERVER_ERROR),
    ],
)
def test_classify_http_status_mapping(status, code):
    assert classify_exception(types.SimpleNamespace(status_code=status)) is code  # nosec B101


def test_classify_nested_response_status():
    e = types.SimpleNamespace(response=types.SimpleNamespace(status_code=503))
    assert classify_exception(e) is ErrorCode.UNAVAILABLE  # nosec B101 - assert is appropriate in unit tests


def test_classify_httpx_exceptions():
    req = httpx.Request("GET", "https://docai.test")
    assert classify_exception(httpx.ReadTimeout("slow", request=req)) is ErrorCode.TIMEOUT  # nosec B101
    assert classify_exception(httpx.ConnectError("refused", request=req)) is ErrorCode.TRANSPORT  # nosec B101
    assert classify_exception(TimeoutError()) is ErrorCode.TIMEOUT  # nosec B101
    resp = httpx.Response(429, request=req)
    status_exc = httpx.HTTPStatusError("too many", request=req, response=resp)
    assert classify_exception(status_exc) is ErrorCode.RATE_LIMIT  # nosec B101


def test_classify_heuristics():
    assert classify_exception(Exception("rate limit exceeded")) is ErrorCode.RATE_LIMIT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("timed out waiting")) is ErrorCode.TIMEOUT  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("invalid schema")) is ErrorCode.VALIDATION  # nosec B101 - assert is appropriate in unit tests
    assert classify_exception(Exception("random")) is ErrorCode.UNKNOWN  # nosec B101 - assert is appropriate in unit tests


def test_error_to_dict_shapes():
    base = DocAIError(code=ErrorCode.RATE_LIMIT, message="slow down", operation="document_chat", status_code=429)
    assert base.to_dict() == {  # nosec B101
        "error": "slow down",
        "error_code": "rate_limit",
        "operation": "document_chat",
        "status_code": 429,
    }
    schema = InvalidSchemaFormat("bad", stage="balance", position=12)
    assert schema.to_dict()["stage"] == "balance" and schema.to_dict()["position"] == 12  # nosec B101
    assert schema.code is ErrorCode.VALIDATION  # nosec B101


def test_stream_error_types():
    missing = MissingStreamBody(operation="document_chat_stream")
    assert missing.code is ErrorCode.INTERNAL and isinstance(missing, DocAIError)  # nosec B101
    err = StreamTransportError("reset", status_code=502, code=ErrorCode.TRANSIENT)
    assert err.code is ErrorCode.TRANSIENT and err.status_code == 502  # nosec B101
