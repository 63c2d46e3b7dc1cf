"""Unified error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``upstage_docai.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.docai_error import DocAIError
from .errors_parts.schema_errors import InvalidSchemaFormat
from .errors_parts.stream_errors import MalformedFrame, MissingStreamBody, StreamTransportError
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "DocAIError",
    "InvalidSchemaFormat",
    "MalformedFrame",
    "MissingStreamBody",
    "StreamTransportError",
    "classify_exception",
]
