"""Form building and response shaping for document parsing.

Pure functions: no I/O, no logging.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Sequence


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_parse_form(
    *,
    model: str,
    ocr: str,
    output_formats: Sequence[str],
    coordinates: bool,
    chart_recognition: bool,
    base64_encoding: Sequence[str],
    merge_multipage_tables: bool,
) -> Dict[str, str]:
    """Return the non-file multipart fields for a parse request.

    ``base64_encoding`` is only sent when non-empty and
    ``merge_multipage_tables`` only when true.
    """
    form: Dict[str, str] = {
        "model": model,
        "ocr": ocr,
        "output_formats": json.dumps(list(output_formats)),
        "coordinates": _flag(coordinates),
        "chart_recognition": _flag(chart_recognition),
    }
    if base64_encoding:
        form["base64_encoding"] = json.dumps(list(base64_encoding))
    if merge_multipage_tables:
        form["merge_multipage_tables"] = "true"
    return form


def shape_parse_result(response: Any, return_mode: str) -> Any:
    """Reshape a parse response according to ``return_mode``.

    ``full`` returns the response unchanged; the ``content_*`` modes return a
    single-key dict with the matching content string (``""`` when absent);
    ``elements`` returns ``{"elements": [...]}``.
    """
    if return_mode == "full":
        return response
    body = response if isinstance(response, Mapping) else {}
    content = body.get("content") if isinstance(body.get("content"), Mapping) else {}
    if return_mode == "content_html":
        return {"html": content.get("html") or ""}
    if return_mode == "content_markdown":
        return {"markdown": content.get("markdown") or ""}
    if return_mode == "content_text":
        return {"text": content.get("text") or ""}
    if return_mode == "elements":
        return {"elements": body.get("elements") or []}
    raise ValueError(f"unknown return mode: {return_mode!r}")


def shape_async_submit(response: Any) -> Dict[str, Any]:
    body = response if isinstance(response, Mapping) else {}
    return {"request_id": body.get("request_id"), "submitted": True}


__all__ = ["build_parse_form", "shape_parse_result", "shape_async_submit"]
