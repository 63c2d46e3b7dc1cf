"""Document parsing client.

Uploads a document to the digitisation endpoint (synchronously or as an
async job) and reshapes the result. Async jobs are polled by the caller with
:meth:`DocumentParsingClient.get_async_result`; nothing here waits or retries.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Sequence
from urllib.parse import quote

from ..base.api_client import BaseApiClient
from ..base.errors import ErrorCode, DocAIError
from ..base.logging import LogContext
from ..base.models import BinaryInput
from ..config.defaults import (
    DOCUMENT_PARSE_BASE64_CATEGORIES,
    DOCUMENT_PARSE_DEFAULT_MODEL,
    DOCUMENT_PARSE_OCR_MODES,
    DOCUMENT_PARSE_OUTPUT_FORMATS,
    DOCUMENT_PARSE_RETURN_MODES,
)
from .helpers import build_parse_form, shape_async_submit, shape_parse_result

PARSE_PATH = "/document-digitization"
ASYNC_PATH = "/document-digitization/async"
REQUESTS_PATH = "/document-digitization/requests"


class DocumentParsingClient(BaseApiClient):
    """Client for ``/document-digitization``.

    Parameters are those of :class:`BaseApiClient`; the default model comes
    from the ``parse_model`` configuration key.
    """

    service_name = "document_parsing"

    def _default_model(self) -> str:
        return self._config.get("parse_model") or DOCUMENT_PARSE_DEFAULT_MODEL

    def parse(
        self,
        document: Any,
        *,
        model: Optional[str] = None,
        ocr: str = "auto",
        output_formats: Sequence[str] = ("html",),
        coordinates: bool = True,
        chart_recognition: bool = True,
        base64_encoding: Sequence[str] = (),
        merge_multipage_tables: bool = False,
        return_mode: str = "full",
    ) -> Any:
        """Parse ``document`` synchronously.

        Parameters:
            document: :class:`BinaryInput`, raw bytes, or a file path.
            model: Parse model; defaults to the configured ``parse_model``.
            ocr: ``"auto"`` or ``"force"``.
            output_formats: Any of ``html``, ``markdown``, ``text``.
            coordinates: Request element coordinates.
            chart_recognition: Convert charts to tables.
            base64_encoding: Element categories to return as base64 images.
            merge_multipage_tables: Merge tables split across pages.
            return_mode: ``full``, ``content_html``, ``content_markdown``,
                ``content_text`` or ``elements``.

        Returns:
            The raw response (``full``) or a reshaped dict.

        Raises:
            DocAIError: invalid options, transport failure or non-2xx status.
        """
        operation = "document_parse"
        self._choice(return_mode, DOCUMENT_PARSE_RETURN_MODES, "return_mode", operation)
        response = self._upload(PARSE_PATH, document, operation=operation, model=model, ocr=ocr,
                                output_formats=output_formats, coordinates=coordinates,
                                chart_recognition=chart_recognition, base64_encoding=base64_encoding,
                                merge_multipage_tables=merge_multipage_tables)
        return shape_parse_result(response, return_mode)

    def submit_async(
        self,
        document: Any,
        *,
        model: Optional[str] = None,
        ocr: str = "auto",
        output_formats: Sequence[str] = ("html",),
        coordinates: bool = True,
        chart_recognition: bool = True,
        base64_encoding: Sequence[str] = (),
        merge_multipage_tables: bool = False,
    ) -> Dict[str, Any]:
        """Submit an async parse job; returns ``{"request_id", "submitted": True}``."""
        response = self._upload(ASYNC_PATH, document, operation="document_parse_async_submit", model=model,
                                ocr=ocr, output_formats=output_formats, coordinates=coordinates,
                                chart_recognition=chart_recognition, base64_encoding=base64_encoding,
                                merge_multipage_tables=merge_multipage_tables)
        return shape_async_submit(response)

    def get_async_result(self, request_id: str) -> Any:
        """Fetch status/result of an async job by id (id is URL-encoded)."""
        operation = "document_parse_async_get"
        self._require(request_id, "request_id is required", operation)
        path = f"{REQUESTS_PATH}/{quote(request_id.strip(), safe='')}"
        ctx = LogContext(operation=operation, request_id=request_id)
        return self._request("GET", path, operation=operation, ctx=ctx)

    def list_async_requests(self) -> Any:
        """List async jobs of the account."""
        return self._request("GET", REQUESTS_PATH, operation="document_parse_async_list")

    def _upload(self, path: str, document: Any, *, operation: str, model: Optional[str], ocr: str,
                output_formats: Sequence[str], coordinates: bool, chart_recognition: bool,
                base64_encoding: Sequence[str], merge_multipage_tables: bool) -> Any:
        self._choice(ocr, DOCUMENT_PARSE_OCR_MODES, "ocr", operation)
        for fmt in output_formats:
            self._choice(fmt, DOCUMENT_PARSE_OUTPUT_FORMATS, "output_formats", operation)
        for cat in base64_encoding:
            self._choice(cat, DOCUMENT_PARSE_BASE64_CATEGORIES, "base64_encoding", operation)
        try:
            binary = BinaryInput.coerce(document)
        except (TypeError, OSError) as e:
            raise DocAIError(code=ErrorCode.VALIDATION, message=f"invalid document: {e}", operation=operation, raw=e) from e
        model = model or self._default_model()
        form = build_parse_form(
            model=model,
            ocr=ocr,
            output_formats=output_formats,
            coordinates=coordinates,
            chart_recognition=chart_recognition,
            base64_encoding=base64_encoding,
            merge_multipage_tables=merge_multipage_tables,
        )
        ctx = LogContext(operation=operation, model=model, extra={"bytes": len(binary.data)})
        return self._request(
            "POST",
            path,
            operation=operation,
            ctx=ctx,
            data=form,
            files={"document": binary.multipart("upload")},
        )


__all__ = ["DocumentParsingClient", "PARSE_PATH", "ASYNC_PATH", "REQUESTS_PATH"]
