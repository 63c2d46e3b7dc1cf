"""
``response_format`` helpers for information-extraction requests.

Two input modes are supported:

* full mode: the caller supplies the whole ``response_format`` object, as a
  mapping or as (possibly malformed) JSON text run through the repair parser;
* schema-only mode: the caller supplies just a JSON schema and a name, and the
  wrapper object is built here.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Mapping, Optional, Union

from pydantic import ValidationError

from ..errors import InvalidSchemaFormat
from ..models import ResponseFormatSpec
from .repair import RESPONSE_FORMAT_KEYS, STAGE_FALLBACK, repair_json_detailed
from .stages import cleanse


def _validate(obj: Any, *, stage: str, operation: Optional[str]) -> Dict[str, Any]:
    if not isinstance(obj, dict):
        raise InvalidSchemaFormat("response_format must be a JSON object", stage=stage, operation=operation)
    missing = [k for k in RESPONSE_FORMAT_KEYS if k not in obj]
    if missing:
        raise InvalidSchemaFormat(
            f"response_format is missing required fields: {', '.join(missing)}",
            stage="validate",
            operation=operation,
        )
    try:
        ResponseFormatSpec.model_validate(obj)
    except ValidationError as e:
        raise InvalidSchemaFormat(
            f"invalid response_format: {e.errors()[0].get('msg', str(e))}",
            stage="validate",
            operation=operation,
            raw=e,
        ) from e
    return obj


def parse_response_format(
    value: Union[str, Mapping[str, Any]],
    *,
    logger: Optional[logging.Logger] = None,
    operation: Optional[str] = None,
) -> Dict[str, Any]:
    """Turn a full ``response_format`` value into a validated dict.

    Parameters:
        value: A mapping (validated as-is) or JSON text (repaired first).
        logger: Passed through to the repair parser for stage diagnostics.
        operation: Recorded on raised errors.

    Returns:
        The parsed object, unchanged apart from repairs. Unknown keys survive.

    Raises:
        InvalidSchemaFormat: ``stage="fallback"`` with the decoder position
            when no repair produced valid JSON, ``stage="validate"`` when the
            JSON lacks ``type``/``json_schema`` or has the wrong shape.
    """
    if isinstance(value, Mapping):
        return _validate(dict(value), stage="validate", operation=operation)
    if not isinstance(value, str):
        raise InvalidSchemaFormat(
            f"invalid response format data type: {type(value).__name__}", stage="input", operation=operation
        )

    outcome = repair_json_detailed(value, logger=logger)
    if outcome.ok:
        return _validate(outcome.value, stage=outcome.stage, operation=operation)

    # fallback handed back the original text; one last plain parse decides
    try:
        reparsed = json.loads(outcome.value)
    except json.JSONDecodeError as e:
        raise InvalidSchemaFormat(
            f"invalid full response format JSON: {e.msg} (position {e.pos})",
            stage=STAGE_FALLBACK,
            position=e.pos,
            operation=operation,
            raw=e,
        ) from e
    return _validate(reparsed, stage=STAGE_FALLBACK, operation=operation)


def build_response_format(
    schema: Union[str, Mapping[str, Any]],
    name: str,
    *,
    operation: Optional[str] = None,
) -> Dict[str, Any]:
    """Wrap a bare JSON schema as ``{"type": "json_schema", "json_schema": {...}}``.

    String schemas are cleansed (trim, zero-width removal) but not repaired.

    Raises:
        InvalidSchemaFormat: the schema text is not valid JSON, is not an
            object, or ``name`` is empty.
    """
    if isinstance(schema, str):
        try:
            schema_obj = json.loads(cleanse(schema))
        except json.JSONDecodeError as e:
            raise InvalidSchemaFormat(
                f"invalid JSON schema provided: {e.msg} (position {e.pos})",
                stage="schema",
                position=e.pos,
                operation=operation,
                raw=e,
            ) from e
    elif isinstance(schema, Mapping):
        schema_obj = dict(schema)
    else:
        raise InvalidSchemaFormat(
            f"invalid schema data type: {type(schema).__name__}", stage="schema", operation=operation
        )
    if not isinstance(schema_obj, dict):
        raise InvalidSchemaFormat("JSON schema must be an object", stage="schema", operation=operation)
    try:
        spec = ResponseFormatSpec.from_schema(schema_obj, name)
    except ValidationError as e:
        raise InvalidSchemaFormat(
            "schema name must be a non-empty string", stage="validate", operation=operation, raw=e
        ) from e
    return spec.to_payload()


def parse_json_content(content: Any) -> Any:
    """Decode model message content.

    Empty content yields ``{}``. Content that is not JSON text is returned
    as ``{"_raw": content}``. Non-string content is returned unchanged.
    """
    if content is None or content == "":
        return {}
    if not isinstance(content, str):
        return content
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        return {"_raw": content}


__all__ = ["parse_response_format", "build_response_format", "parse_json_content"]
