"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `upstage_docai.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .docai_error import DocAIError
from .schema_errors import InvalidSchemaFormat
from .stream_errors import MalformedFrame, MissingStreamBody, StreamTransportError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "DocAIError",
    "InvalidSchemaFormat",
    "MalformedFrame",
    "MissingStreamBody",
    "StreamTransportError",
    "classify_exception",
]
