"""
Base package: cross-cutting building blocks shared by the API clients.

- Errors: normalized error codes and exception taxonomy
- Logging: JSON structured logging helpers
- HTTP: pooled ``httpx`` clients and response checks
- Models: records exchanged with callers
- JSON repair and SSE streaming: the parsing core
- Factory: lazy creation of service clients by name
"""

from .cancellation import CancellationToken, CancelledError
from .errors import (
    DocAIError,
    ErrorCode,
    InvalidSchemaFormat,
    MalformedFrame,
    MissingStreamBody,
    StreamTransportError,
    classify_exception,
)
from .factory import ClientFactory, UnknownServiceError
from .models import BinaryInput, ChatDelta, JsonSchemaSpec, Message, ResponseFormatSpec, TokenUsage
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    # Errors
    "DocAIError",
    "ErrorCode",
    "InvalidSchemaFormat",
    "MalformedFrame",
    "MissingStreamBody",
    "StreamTransportError",
    "classify_exception",
    # Models
    "BinaryInput",
    "ChatDelta",
    "JsonSchemaSpec",
    "Message",
    "ResponseFormatSpec",
    "TokenUsage",
    # Factory
    "ClientFactory",
    "UnknownServiceError",
    # Timeouts & cancellation
    "TimeoutConfig",
    "get_timeout_config",
    "CancellationToken",
    "CancelledError",
]
