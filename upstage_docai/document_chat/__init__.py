"""Document chat: file upload, questions over files, and a chat-model adapter."""

from .chat_model import DocumentChatModel
from .client import DocumentChatClient

__all__ = ["DocumentChatClient", "DocumentChatModel"]
