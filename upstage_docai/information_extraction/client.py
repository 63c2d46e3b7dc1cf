"""Information extraction client.

Two operations share one endpoint family:

* :meth:`InformationExtractionClient.extract` pulls structured data out of a
  document according to a JSON schema (``/information-extraction``);
* :meth:`InformationExtractionClient.generate_schema` asks the service to
  propose a schema for a document (``/information-extraction/schema-generation``).

The schema may be given as a bare schema plus a name, or as a full
``response_format`` object. Full-format text goes through the JSON repair
parser, so hand-edited input with stray braces or invisible characters is
accepted when it can be fixed unambiguously.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from ..base.api_client import BaseApiClient
from ..base.errors import DocAIError, ErrorCode
from ..base.json_repair import build_response_format, parse_json_content, parse_response_format
from ..base.logging import LogContext
from ..base.models import BinaryInput
from ..config.defaults import (
    INFORMATION_EXTRACT_DEFAULT_MODEL,
    INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME,
    INFORMATION_EXTRACT_RETURN_MODES,
    SCHEMA_GENERATION_RETURN_MODES,
)
from .helpers import build_extraction_body, build_schema_generation_body, message_content

EXTRACT_PATH = "/information-extraction"
SCHEMA_GENERATION_PATH = "/information-extraction/schema-generation"


class InformationExtractionClient(BaseApiClient):
    """Client for the information-extraction endpoints."""

    service_name = "information_extraction"

    def _default_model(self) -> str:
        return self._config.get("extract_model") or INFORMATION_EXTRACT_DEFAULT_MODEL

    def _document_url(self, document: Any, image_url: Optional[str], operation: str) -> str:
        if document is not None:
            try:
                return BinaryInput.coerce(document).to_data_url()
            except (TypeError, OSError) as e:
                raise DocAIError(
                    code=ErrorCode.VALIDATION, message=f"invalid document: {e}", operation=operation, raw=e
                ) from e
        self._require(image_url, "image URL is required when no document is given", operation)
        return image_url.strip()

    def _response_format(
        self,
        schema: Union[str, Mapping[str, Any], None],
        schema_name: str,
        response_format: Union[str, Mapping[str, Any], None],
        operation: str,
    ) -> Dict[str, Any]:
        if response_format is not None:
            return parse_response_format(response_format, logger=self._logger, operation=operation)
        if schema is None:
            raise DocAIError(
                code=ErrorCode.VALIDATION,
                message="either schema or response_format is required",
                operation=operation,
            )
        return build_response_format(schema, schema_name, operation=operation)

    def extract(
        self,
        *,
        document: Any = None,
        image_url: Optional[str] = None,
        schema: Union[str, Mapping[str, Any], None] = None,
        schema_name: str = INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME,
        response_format: Union[str, Mapping[str, Any], None] = None,
        model: Optional[str] = None,
        pages_per_chunk: int = 0,
        return_mode: str = "extracted",
    ) -> Any:
        """Extract structured data from a document.

        Parameters:
            document: :class:`BinaryInput`, bytes or path; sent as a ``data:`` URL.
            image_url: Public URL of the document, used when ``document`` is None.
            schema: Bare JSON schema (text or mapping), wrapped with ``schema_name``.
            schema_name: Name for the wrapped schema.
            response_format: Full ``response_format`` (text or mapping); takes
                precedence over ``schema``.
            model: Extraction model; defaults to the configured ``extract_model``.
            pages_per_chunk: Enables server-side chunking when > 0.
            return_mode: ``extracted`` or ``full``.

        Returns:
            ``full``: the raw response. ``extracted``:
            ``{"extracted", "model", "usage", "full_response"}`` where
            ``extracted`` is the decoded message content (``{"_raw": ...}``
            when the content is not JSON).

        Raises:
            InvalidSchemaFormat: the schema or response format is unusable.
            DocAIError: missing input, transport failure or non-2xx status.
        """
        operation = "information_extract"
        self._choice(return_mode, INFORMATION_EXTRACT_RETURN_MODES, "return_mode", operation)
        fmt = self._response_format(schema, schema_name, response_format, operation)
        url = self._document_url(document, image_url, operation)
        model = model or self._default_model()
        body = build_extraction_body(model=model, url=url, response_format=fmt, pages_per_chunk=pages_per_chunk)
        ctx = LogContext(operation=operation, model=model, extra={"schema_name": fmt["json_schema"].get("name")})
        response = self._request("POST", EXTRACT_PATH, operation=operation, ctx=ctx, json=body)
        if return_mode == "full":
            return response
        return {
            "extracted": parse_json_content(message_content(response)),
            "model": response.get("model") if isinstance(response, Mapping) else None,
            "usage": response.get("usage") if isinstance(response, Mapping) else None,
            "full_response": response,
        }

    def generate_schema(
        self,
        *,
        document: Any = None,
        image_url: Optional[str] = None,
        prompt: str = "",
        model: Optional[str] = None,
        return_mode: str = "schema",
    ) -> Any:
        """Ask the service to propose an extraction schema for a document.

        Returns:
            ``full``: the raw response. ``schema``:
            ``{"schema_type", "json_schema", "raw", "model", "usage"}`` where
            ``raw`` is the decoded message content.
        """
        operation = "schema_generation"
        self._choice(return_mode, SCHEMA_GENERATION_RETURN_MODES, "return_mode", operation)
        url = self._document_url(document, image_url, operation)
        model = model or self._default_model()
        body = build_schema_generation_body(model=model, url=url, prompt=prompt)
        ctx = LogContext(operation=operation, model=model)
        response = self._request("POST", SCHEMA_GENERATION_PATH, operation=operation, ctx=ctx, json=body)
        if return_mode == "full":
            return response
        raw = parse_json_content(message_content(response))
        is_obj = isinstance(raw, Mapping)
        return {
            "schema_type": raw.get("type") if is_obj else None,
            "json_schema": raw.get("json_schema") if is_obj else None,
            "raw": raw,
            "model": response.get("model") if isinstance(response, Mapping) else None,
            "usage": response.get("usage") if isinstance(response, Mapping) else None,
        }


__all__ = ["InformationExtractionClient", "EXTRACT_PATH", "SCHEMA_GENERATION_PATH"]
