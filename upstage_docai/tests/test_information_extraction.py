"""InformationExtractionClient: schema handling, request body and result shaping."""
from __future__ import annotations

import base64
import json

import httpx
import pytest

from upstage_docai.base.errors import DocAIError, ErrorCode, InvalidSchemaFormat
from upstage_docai.base.models import BinaryInput
from upstage_docai.config import reset_config_cache
from upstage_docai.information_extraction import InformationExtractionClient
from upstage_docai.information_extraction.helpers import build_schema_generation_body, message_content

SCHEMA = {"type": "object", "properties": {"total": {"type": "number"}}}


def _completion(content, **extra):
    body = {
        "model": "information-extract-250930",
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 4, "total_tokens": 14},
    }
    body.update(extra)
    return body


class Recorder:
    """MockTransport handler returning a fixed body and keeping decoded requests."""

    def __init__(self, body, status=200):
        self.body = body
        self.status = status
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append((request.url.path, json.loads(request.read())))
        return httpx.Response(self.status, json=self.body)


def test_extract_with_bare_schema_wraps_it(make_client):
    rec = Recorder(_completion('{"total": 42.5}'))
    client = make_client(InformationExtractionClient, rec)
    doc = BinaryInput(data=b"img", file_name="r.png", mime_type="image/png")

    result = client.extract(document=doc, schema=SCHEMA, schema_name="receipt")

    path, body = rec.requests[0]
    assert path == "/v1/information-extraction"  # nosec B101
    assert body["model"] == "information-extract"  # nosec B101
    assert body["response_format"] == {  # nosec B101
        "type": "json_schema",
        "json_schema": {"name": "receipt", "schema": SCHEMA},
    }
    part = body["messages"][0]["content"][0]
    assert part["type"] == "image_url"  # nosec B101
    assert part["image_url"]["url"] == "data:image/png;base64," + base64.b64encode(b"img").decode()  # nosec B101
    assert "chunking" not in body  # nosec B101
    assert result["extracted"] == {"total": 42.5}  # nosec B101
    assert result["model"] == "information-extract-250930"  # nosec B101
    assert result["usage"]["total_tokens"] == 14  # nosec B101
    assert result["full_response"] == rec.body  # nosec B101


def test_extract_repairs_full_response_format_text(make_client):
    rec = Recorder(_completion('{"total": 1}'))
    client = make_client(InformationExtractionClient, rec)
    broken = '{"type":"json_schema","json_schema":{"name":"inv","schema":{"type":"object"}}}}}'

    client.extract(image_url=" https://files.test/a.png ", response_format=broken, pages_per_chunk=3)

    _, body = rec.requests[0]
    assert body["response_format"]["json_schema"]["name"] == "inv"  # nosec B101
    assert body["chunking"] == {"pages_per_chunk": 3}  # nosec B101
    assert body["messages"][0]["content"][0]["image_url"]["url"] == "https://files.test/a.png"  # nosec B101


def test_response_format_takes_precedence_over_schema(make_client):
    rec = Recorder(_completion("{}"))
    client = make_client(InformationExtractionClient, rec)
    fmt = {"type": "json_schema", "json_schema": {"name": "full", "schema": {}}}
    client.extract(image_url="https://x.test/d.pdf", schema=SCHEMA, response_format=fmt)
    assert rec.requests[0][1]["response_format"]["json_schema"]["name"] == "full"  # nosec B101


def test_unrecoverable_response_format_fails_before_request(make_client):
    rec = Recorder({})
    client = make_client(InformationExtractionClient, rec)
    with pytest.raises(InvalidSchemaFormat) as ei:
        client.extract(image_url="https://x.test/d.pdf", response_format='{"type": json_schema')
    assert ei.value.operation == "information_extract"  # nosec B101
    assert rec.requests == []  # nosec B101


def test_schema_or_response_format_required(make_client):
    client = make_client(InformationExtractionClient, Recorder({}))
    with pytest.raises(DocAIError) as ei:
        client.extract(image_url="https://x.test/d.pdf")
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101


@pytest.mark.parametrize("image_url", [None, "", "   "])
def test_image_url_required_without_document(make_client, image_url):
    client = make_client(InformationExtractionClient, Recorder({}))
    with pytest.raises(DocAIError) as ei:
        client.extract(image_url=image_url, schema=SCHEMA)
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101


def test_non_json_content_is_kept_raw(make_client):
    client = make_client(InformationExtractionClient, Recorder(_completion("not json")))
    result = client.extract(image_url="https://x.test/d.pdf", schema=SCHEMA)
    assert result["extracted"] == {"_raw": "not json"}  # nosec B101


def test_full_mode_returns_raw_response(make_client):
    rec = Recorder(_completion('{"a": 1}'))
    client = make_client(InformationExtractionClient, rec)
    assert client.extract(image_url="https://x.test/d.pdf", schema=SCHEMA, return_mode="full") == rec.body  # nosec B101


def test_invalid_return_mode(make_client):
    client = make_client(InformationExtractionClient, Recorder({}))
    with pytest.raises(DocAIError):
        client.extract(image_url="https://x.test/d.pdf", schema=SCHEMA, return_mode="pretty")


def test_configured_model_is_used(make_client, monkeypatch):
    monkeypatch.setenv("UPSTAGE_EXTRACT_MODEL", "information-extract-nightly")
    reset_config_cache()
    rec = Recorder(_completion("{}"))
    make_client(InformationExtractionClient, rec).extract(image_url="https://x.test/d.pdf", schema=SCHEMA)
    assert rec.requests[0][1]["model"] == "information-extract-nightly"  # nosec B101


def test_generate_schema_shapes_result(make_client):
    proposed = {"type": "json_schema", "json_schema": {"name": "doc", "schema": SCHEMA}}
    rec = Recorder(_completion(json.dumps(proposed)))
    client = make_client(InformationExtractionClient, rec)

    result = client.generate_schema(image_url="https://x.test/d.pdf", prompt="  invoice totals ")

    path, body = rec.requests[0]
    assert path == "/v1/information-extraction/schema-generation"  # nosec B101
    assert body["messages"][0] == {"role": "user", "content": "invoice totals"}  # nosec B101
    assert result["schema_type"] == "json_schema"  # nosec B101
    assert result["json_schema"] == proposed["json_schema"]  # nosec B101
    assert result["raw"] == proposed  # nosec B101


def test_generate_schema_with_unparseable_content(make_client):
    client = make_client(InformationExtractionClient, Recorder(_completion("sorry")))
    result = client.generate_schema(image_url="https://x.test/d.pdf")
    assert result["schema_type"] is None and result["json_schema"] is None  # nosec B101


def test_server_error_is_surfaced(make_client):
    rec = Recorder({"error": {"message": "schema too large"}}, status=400)
    client = make_client(InformationExtractionClient, rec)
    with pytest.raises(DocAIError) as ei:
        client.extract(image_url="https://x.test/d.pdf", schema=SCHEMA)
    assert ei.value.code is ErrorCode.VALIDATION and ei.value.status_code == 400  # nosec B101
    assert ei.value.message == "schema too large"  # nosec B101


def test_helper_shapes():
    assert message_content({}) == ""  # nosec B101
    assert message_content({"choices": [{"message": {"content": None}}]}) == ""  # nosec B101
    body = build_schema_generation_body(model="m", url="u", prompt="   ")
    assert len(body["messages"]) == 1  # nosec B101
