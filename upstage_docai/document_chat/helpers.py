"""Request builders and response shaping for document chat."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Union

from ..base.errors import DocAIError, ErrorCode
from ..base.streaming import extract_conversation_id, output_message_text
from ..base.tokens import usage_dict
from ..config.defaults import (
    REASONING_DEFAULT_EFFORT,
    REASONING_DEFAULT_SUMMARY,
    REASONING_EFFORTS,
    REASONING_SUMMARIES,
)


def normalize_file_ids(file_ids: Union[str, Sequence[str], None], operation: str = "document_chat") -> List[str]:
    """Split, trim and de-blank file ids.

    Accepts a comma-separated string or a sequence of strings (each of which
    may itself hold commas).

    Raises:
        DocAIError: ``validation`` code when no id remains.
    """
    if file_ids is None:
        parts: List[str] = []
    elif isinstance(file_ids, str):
        parts = file_ids.split(",")
    else:
        parts = [p for item in file_ids for p in str(item).split(",")]
    ids = [p.strip() for p in parts if p and p.strip()]
    if not ids:
        raise DocAIError(code=ErrorCode.VALIDATION, message="At least one file ID is required", operation=operation)
    return ids


def reasoning_block(effort: Optional[str], summary: Optional[str], operation: str) -> Optional[Dict[str, str]]:
    """Return ``{"effort", "summary"}`` when either is given, else ``None``.

    The missing half falls back to ``medium`` / ``auto``.
    """
    if not effort and not summary:
        return None
    effort = effort or REASONING_DEFAULT_EFFORT
    summary = summary or REASONING_DEFAULT_SUMMARY
    if effort not in REASONING_EFFORTS:
        raise DocAIError(
            code=ErrorCode.VALIDATION,
            message=f"reasoning_effort must be one of {', '.join(REASONING_EFFORTS)}; got {effort!r}",
            operation=operation,
        )
    if summary not in REASONING_SUMMARIES:
        raise DocAIError(
            code=ErrorCode.VALIDATION,
            message=f"reasoning_summary must be one of {', '.join(REASONING_SUMMARIES)}; got {summary!r}",
            operation=operation,
        )
    return {"effort": effort, "summary": summary}


def build_response_body(
    *,
    model: str,
    file_ids: List[str],
    query: str,
    stream: bool = False,
    conversation_id: Optional[str] = None,
    reasoning: Optional[Dict[str, str]] = None,
    temperature: Optional[float] = None,
) -> Dict[str, Any]:
    content: List[Dict[str, Any]] = [{"type": "input_file", "file_id": fid} for fid in file_ids]
    content.append({"type": "input_text", "text": query})
    body: Dict[str, Any] = {
        "model": model,
        "stream": stream,
        "input": [{"role": "user", "content": content}],
    }
    if reasoning:
        body["reasoning"] = reasoning
    if conversation_id:
        body["conversation"] = {"id": conversation_id}
    if temperature is not None:
        body["temperature"] = temperature
    return body


def shape_chat_result(response: Any, query: str) -> Dict[str, Any]:
    """Reduce a response object to ``content``, ``conversation_id``, ``query``, ``usage``."""
    frame = response if isinstance(response, dict) else {}
    return {
        "content": output_message_text(frame),
        "conversation_id": extract_conversation_id(frame),
        "query": query,
        "usage": usage_dict(frame),
        "full_response": response,
    }


__all__ = [
    "normalize_file_ids",
    "reasoning_block",
    "build_response_body",
    "shape_chat_result",
]
