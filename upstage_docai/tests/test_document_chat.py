"""Document chat: uploads, responses, SSE streaming and the chat-model adapter."""
from __future__ import annotations

import json

import httpx
import pytest

from upstage_docai.base.cancellation import CancellationToken
from upstage_docai.base.errors import DocAIError, ErrorCode, StreamTransportError
from upstage_docai.base.streaming import OUTPUT_TEXT_DELTA, REASONING_SUMMARY_DELTA, DeltaPolicy, accumulate_deltas
from upstage_docai.document_chat import DocumentChatClient, DocumentChatModel
from upstage_docai.document_chat.helpers import build_response_body, normalize_file_ids, reasoning_block

ANSWER = {
    "id": "resp_1",
    "conversation": {"id": "conv_9"},
    "output": [
        {"type": "reasoning", "summary": []},
        {"type": "message", "content": [{"type": "output_text", "text": "The total is 42."}]},
    ],
    "usage": {"input_tokens": 120, "output_tokens": 8, "total_tokens": 128},
}


def _sse(*frames) -> bytes:
    return b"".join(f"data: {json.dumps(f)}\n\n".encode("utf-8") for f in frames)


SSE_BODY = _sse(
    {"type": REASONING_SUMMARY_DELTA, "delta": "Looking at page 2."},
    {"type": OUTPUT_TEXT_DELTA, "delta": "The total "},
    {"type": OUTPUT_TEXT_DELTA, "delta": "is 42."},
    {
        "type": "response.completed",
        "response": {"conversation": {"id": "conv_9"}, "usage": {"input_tokens": 120, "output_tokens": 8}},
    },
) + b"data: [DONE]\n\n"


class Recorder:
    def __init__(self, response_factory):
        self.factory = response_factory
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        request.read()
        return self.factory(request)

    def json_body(self, i=0):
        return json.loads(self.requests[i].content)


def _sse_response(request):
    return httpx.Response(200, headers={"content-type": "text/event-stream"}, content=SSE_BODY)


# ---- files ----


def test_upload_file_sends_purpose_and_file_part(make_client, tmp_path):
    path = tmp_path / "contract.pdf"
    path.write_bytes(b"%PDF contract")
    rec = Recorder(lambda r: httpx.Response(200, json={"id": "file-abc", "filename": "contract.pdf"}))
    client = make_client(DocumentChatClient, rec)

    record = client.upload_file(str(path))

    assert record["id"] == "file-abc"  # nosec B101
    req = rec.requests[0]
    assert req.url.path == "/v1/document-chat/files"  # nosec B101
    assert b'name="purpose"' in req.content and b"user_data" in req.content  # nosec B101
    assert b'name="file"; filename="contract.pdf"' in req.content  # nosec B101


def test_upload_bytes_use_default_name(make_client):
    rec = Recorder(lambda r: httpx.Response(200, json={"id": "f"}))
    make_client(DocumentChatClient, rec).upload_file(b"raw", purpose="assistants")
    assert b'filename="document"' in rec.requests[0].content  # nosec B101
    assert b"assistants" in rec.requests[0].content  # nosec B101


def test_upload_missing_path_is_validation_error(make_client, tmp_path):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json={})))
    with pytest.raises(DocAIError) as ei:
        client.upload_file(str(tmp_path / "nope.pdf"))
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101


def test_retrieve_file_query_params(make_client):
    rec = Recorder(lambda r: httpx.Response(200, json={"id": "file 1", "pages": []}))
    client = make_client(DocumentChatClient, rec)
    client.retrieve_file(" file 1 ", pages="1-3", view="markdown")
    client.retrieve_file("file-2")
    first, second = rec.requests
    assert first.url.raw_path.decode().startswith("/v1/document-chat/files/file%201?")  # nosec B101
    assert first.url.params["pages"] == "1-3" and first.url.params["view"] == "markdown"  # nosec B101
    assert second.url.query == b""  # nosec B101


def test_retrieve_requires_file_id(make_client):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json={})))
    with pytest.raises(DocAIError):
        client.retrieve_file("")


# ---- responses ----


def test_get_response_body_and_shape(make_client):
    rec = Recorder(lambda r: httpx.Response(200, json=ANSWER))
    client = make_client(DocumentChatClient, rec)

    result = client.get_response(" file-a , file-b,, ", "What is the total?", conversation_id="conv_8")

    body = rec.json_body()
    assert rec.requests[0].url.path == "/v1/document-chat/responses"  # nosec B101
    assert body["model"] == "genius" and body["stream"] is False  # nosec B101
    assert body["input"] == [  # nosec B101
        {
            "role": "user",
            "content": [
                {"type": "input_file", "file_id": "file-a"},
                {"type": "input_file", "file_id": "file-b"},
                {"type": "input_text", "text": "What is the total?"},
            ],
        }
    ]
    assert body["conversation"] == {"id": "conv_8"}  # nosec B101
    assert "reasoning" not in body and "temperature" not in body  # nosec B101
    assert result["content"] == "The total is 42."  # nosec B101
    assert result["conversation_id"] == "conv_9"  # nosec B101
    assert result["query"] == "What is the total?"  # nosec B101
    assert result["usage"] == {"prompt": 120, "completion": 8, "total": 128}  # nosec B101
    assert result["full_response"] == ANSWER  # nosec B101


def test_reasoning_and_temperature_are_sent_when_given(make_client):
    rec = Recorder(lambda r: httpx.Response(200, json=ANSWER))
    client = make_client(DocumentChatClient, rec)
    client.get_response(["f1"], "q", reasoning_effort="high", temperature=0.2, model="turbo")
    body = rec.json_body()
    assert body["reasoning"] == {"effort": "high", "summary": "auto"}  # nosec B101
    assert body["temperature"] == 0.2 and body["model"] == "turbo"  # nosec B101


def test_answer_without_message_yields_empty_content(make_client):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json={"output": []})))
    result = client.get_response("f1", "q")
    assert result["content"] == "" and result["conversation_id"] is None  # nosec B101
    assert result["usage"] == {"prompt": 0, "completion": 0, "total": 0}  # nosec B101


@pytest.mark.parametrize("file_ids", ["", " , ,", [], ["", "  "], None])
def test_blank_file_ids_rejected(make_client, file_ids):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json=ANSWER)))
    with pytest.raises(DocAIError) as ei:
        client.get_response(file_ids, "q")
    assert ei.value.code is ErrorCode.VALIDATION  # nosec B101
    assert ei.value.message == "At least one file ID is required"  # nosec B101


def test_blank_query_rejected(make_client):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json=ANSWER)))
    with pytest.raises(DocAIError):
        client.get_response("f1", "   ")


def test_helper_functions():
    assert normalize_file_ids(["a,b", " c "]) == ["a", "b", "c"]  # nosec B101
    assert reasoning_block(None, None, "op") is None  # nosec B101
    assert reasoning_block(None, "disabled", "op") == {"effort": "medium", "summary": "disabled"}  # nosec B101
    with pytest.raises(DocAIError):
        reasoning_block("extreme", None, "op")
    body = build_response_body(model="m", file_ids=["x"], query="q", stream=True)
    assert body["stream"] is True and "conversation" not in body  # nosec B101


# ---- streaming ----


def test_stream_response_yields_output_then_terminal(make_client):
    rec = Recorder(_sse_response)
    client = make_client(DocumentChatClient, rec)

    deltas = list(client.stream_response("f1", "What is the total?"))

    assert [d.text for d in deltas if not d.finish] == ["The total ", "is 42."]  # nosec B101
    terminal = deltas[-1]
    assert terminal.finish and terminal.error is None  # nosec B101
    assert terminal.usage == {"prompt": 120, "completion": 8, "total": 128}  # nosec B101
    assert terminal.conversation_id == "conv_9"  # nosec B101
    req = rec.requests[0]
    assert req.headers["accept"] == "text/event-stream"  # nosec B101
    assert rec.json_body()["stream"] is True  # nosec B101


def test_stream_is_lazy_until_iterated(make_client):
    rec = Recorder(_sse_response)
    client = make_client(DocumentChatClient, rec)
    deltas = client.stream_response("f1", "q")
    assert rec.requests == []  # nosec B101
    next(deltas)
    assert len(rec.requests) == 1  # nosec B101
    deltas.close()


def test_stream_validation_is_eager(make_client):
    client = make_client(DocumentChatClient, Recorder(_sse_response))
    with pytest.raises(DocAIError):
        client.stream_response("", "q")


def test_stream_missing_api_key_is_eager(make_client):
    client = make_client(DocumentChatClient, Recorder(_sse_response), api_key=None)
    with pytest.raises(DocAIError) as ei:
        client.stream_response("f1", "q")
    assert ei.value.code is ErrorCode.AUTH  # nosec B101


@pytest.mark.parametrize("status,code", [(401, ErrorCode.AUTH), (429, ErrorCode.RATE_LIMIT), (500, ErrorCode.SERVER_ERROR)])
def test_stream_status_error_raises_transport_error(make_client, status, code):
    body = {"error": {"message": "nope"}}
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(status, json=body)))
    deltas = client.stream_response("f1", "q")
    with pytest.raises(StreamTransportError) as ei:
        next(deltas)
    assert ei.value.code is code and ei.value.status_code == status  # nosec B101
    assert ei.value.message == "nope"  # nosec B101
    assert ei.value.operation == "document_chat_stream"  # nosec B101


def test_stream_json_body_is_treated_as_consolidated_frame(make_client):
    client = make_client(DocumentChatClient, Recorder(lambda r: httpx.Response(200, json=ANSWER)))
    result = accumulate_deltas(client.stream_response("f1", "q"))
    assert result["text"] == "The total is 42."  # nosec B101
    assert result["conversation_id"] == "conv_9"  # nosec B101


def test_stream_reasoning_policy_separate(make_client):
    client = make_client(DocumentChatClient, Recorder(_sse_response))
    result = accumulate_deltas(client.stream_response("f1", "q", policy=DeltaPolicy(reasoning="separate")))
    assert result["reasoning"] == "Looking at page 2."  # nosec B101
    assert result["text"] == "The total is 42."  # nosec B101


def test_stream_cancellation_before_first_read(make_client):
    rec = Recorder(_sse_response)
    client = make_client(DocumentChatClient, rec)
    token = CancellationToken()
    token.cancel("user")
    deltas = list(client.stream_response("f1", "q", token=token))
    assert len(deltas) == 1 and deltas[0].error == "cancelled:user"  # nosec B101


# ---- chat model adapter ----


def test_query_from_messages():
    assert DocumentChatModel.query_from_messages("plain") == "plain"  # nosec B101
    messages = [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": [{"type": "text", "text": "last question"}]},
    ]
    assert DocumentChatModel.query_from_messages(messages) == "last question"  # nosec B101
    with pytest.raises(DocAIError):
        DocumentChatModel.query_from_messages([])
    with pytest.raises(DocAIError):
        DocumentChatModel.query_from_messages([42])


def test_chat_model_invoke(make_client):
    rec = Recorder(lambda r: httpx.Response(200, json=ANSWER))
    client = make_client(DocumentChatClient, rec)
    model = DocumentChatModel("f1, f2", client=client, conversation_id="conv_8")

    out = model.invoke([{"role": "user", "content": "total?"}])

    assert out == {  # nosec B101
        "text": "The total is 42.",
        "usage": {"prompt": 120, "completion": 8, "total": 128},
        "conversation_id": "conv_9",
    }
    body = rec.json_body()
    assert body["reasoning"] == {"effort": "medium", "summary": "auto"}  # nosec B101
    assert [p.get("file_id") for p in body["input"][0]["content"][:2]] == ["f1", "f2"]  # nosec B101


def test_chat_model_streaming_invoke(make_client):
    client = make_client(DocumentChatClient, Recorder(_sse_response))
    model = DocumentChatModel(["f1"], client=client, streaming=True)
    out = model.invoke("total?")
    assert out["text"] == "The total is 42."  # nosec B101
    assert out["conversation_id"] == "conv_9"  # nosec B101


def test_chat_model_streaming_cancel_raises(make_client, monkeypatch):
    client = make_client(DocumentChatClient, Recorder(_sse_response))
    model = DocumentChatModel(["f1"], client=client, streaming=True)
    token = CancellationToken()
    token.cancel("stop")
    original = model.stream
    monkeypatch.setattr(model, "stream", lambda messages: original(messages, token=token))
    with pytest.raises(DocAIError) as ei:
        model.invoke("q")
    assert ei.value.code is ErrorCode.CANCELLED  # nosec B101


def test_chat_model_requires_file_ids():
    with pytest.raises(DocAIError):
        DocumentChatModel(" ", api_key="k")
