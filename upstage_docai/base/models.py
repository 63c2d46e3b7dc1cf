"""
Record types shared by the API clients (public surface).

Re-exports the one-class-per-file implementations under
``upstage_docai.base.models_parts``.
"""

from .models_parts.binary_input import BinaryInput
from .models_parts.chat_delta import ChatDelta, DeltaKind
from .models_parts.message import Message, Role
from .models_parts.response_format import JsonSchemaSpec, ResponseFormatSpec
from .models_parts.token_usage import TokenUsage

__all__ = [
    "BinaryInput",
    "ChatDelta",
    "DeltaKind",
    "JsonSchemaSpec",
    "Message",
    "ResponseFormatSpec",
    "Role",
    "TokenUsage",
]
