"""upstage_docai package

Client library for the Upstage document-AI REST API.

Purpose:
    Provide a minimal, stable API for document parsing, information
    extraction and document chat (packaging is configured via the repository
    root ``pyproject.toml``). Callers build a client directly or by service
    name, for example ``create("document_chat").get_response(...)``.

Public API (re-exported):
    - Version: ``__version__``
    - Clients: :class:`DocumentParsingClient`, :class:`InformationExtractionClient`,
      :class:`DocumentChatClient`, :class:`DocumentChatModel`
    - Exceptions: :class:`DocAIError`, :class:`ErrorCode` and subclasses
    - Factory: :func:`create`
    - Parsing core: :func:`repair_json`, :func:`parse_response_format`,
      :func:`iter_chat_deltas`
"""

from typing import Any

from .base.cancellation import CancellationToken, CancelledError
from .base.errors import (
    DocAIError,
    ErrorCode,
    InvalidSchemaFormat,
    MissingStreamBody,
    StreamTransportError,
)
from .base.factory import ClientFactory, UnknownServiceError
from .base.json_repair import parse_response_format, repair_json
from .base.models import BinaryInput, ChatDelta, Message, TokenUsage
from .base.streaming import DeltaPolicy, SSEChunkDecoder, iter_chat_deltas
from .document_chat import DocumentChatClient, DocumentChatModel
from .document_parsing import DocumentParsingClient
from .information_extraction import InformationExtractionClient

__version__ = "0.1.0"


def create(service: str, **kwargs: Any) -> Any:
    """Instantiate a service client via :class:`ClientFactory`.

    Parameters
    ----------
    service:
        ``"document_parsing"``, ``"information_extraction"`` or
        ``"document_chat"`` (hyphens accepted).
    **kwargs:
        Client constructor arguments (``api_key``, ``base_url``,
        ``http_client``, ``logger``, ``config``).

    Raises
    ------
    UnknownServiceError
        Unknown service name or invalid constructor arguments.
    """
    return ClientFactory.create(service, **kwargs)


__all__ = [
    # Version
    "__version__",
    # Clients
    "DocumentParsingClient",
    "InformationExtractionClient",
    "DocumentChatClient",
    "DocumentChatModel",
    "create",
    "ClientFactory",
    "UnknownServiceError",
    # Exceptions
    "DocAIError",
    "ErrorCode",
    "InvalidSchemaFormat",
    "MissingStreamBody",
    "StreamTransportError",
    # Records
    "BinaryInput",
    "ChatDelta",
    "Message",
    "TokenUsage",
    # Parsing core
    "repair_json",
    "parse_response_format",
    "SSEChunkDecoder",
    "DeltaPolicy",
    "iter_chat_deltas",
    # Cancellation
    "CancellationToken",
    "CancelledError",
]
