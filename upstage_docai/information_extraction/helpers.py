"""Request/response helpers for information extraction and schema generation."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional


def image_message(url: str) -> Dict[str, Any]:
    """User message carrying a document as an ``image_url`` part."""
    return {"role": "user", "content": [{"type": "image_url", "image_url": {"url": url}}]}


def message_content(response: Any) -> Any:
    """``choices[0].message.content`` of a chat-completions style response, or ``""``."""
    if not isinstance(response, Mapping):
        return ""
    choices = response.get("choices")
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        return ""
    message = choices[0].get("message")
    if not isinstance(message, Mapping):
        return ""
    content = message.get("content")
    return "" if content is None else content


def build_extraction_body(
    *,
    model: str,
    url: str,
    response_format: Dict[str, Any],
    pages_per_chunk: int = 0,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "model": model,
        "messages": [image_message(url)],
        "response_format": response_format,
    }
    if pages_per_chunk and pages_per_chunk > 0:
        body["chunking"] = {"pages_per_chunk": int(pages_per_chunk)}
    return body


def build_schema_generation_body(*, model: str, url: str, prompt: Optional[str] = None) -> Dict[str, Any]:
    """Schema-generation body; a non-blank ``prompt`` goes first as a text message."""
    messages: List[Dict[str, Any]] = []
    prompt = (prompt or "").strip()
    if prompt:
        messages.append({"role": "user", "content": prompt})
    messages.append(image_message(url))
    return {"model": model, "messages": messages}


__all__ = [
    "image_message",
    "message_content",
    "build_extraction_body",
    "build_schema_generation_body",
]
