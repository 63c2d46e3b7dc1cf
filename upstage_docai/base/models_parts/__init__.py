"""Models parts package.

Prefer ``upstage_docai.base.models`` as the stable import path.
"""

from .binary_input import BinaryInput
from .chat_delta import ChatDelta, DeltaKind
from .message import Message, Role
from .response_format import JsonSchemaSpec, ResponseFormatSpec
from .token_usage import TokenUsage

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
