"""
Binary document payload passed to upload and extraction calls.

``BinaryInput`` keeps the raw bytes together with the file name and MIME type
used for the multipart part (or the ``data:`` URL for extraction requests).
"""
from __future__ import annotations

import base64
import mimetypes
import os
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from ...config.defaults import DEFAULT_MIME_TYPE


@dataclass(frozen=True)
class BinaryInput:
    """An in-memory document.

    Attributes:
        data: Raw file bytes.
        file_name: Name reported to the server; ``None`` lets the caller
            choose a default per endpoint.
        mime_type: Content type; ``None`` means ``application/octet-stream``.
    """

    data: bytes
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: str, mime_type: Optional[str] = None) -> "BinaryInput":
        """Read ``path`` into memory, guessing the MIME type from its suffix."""
        with open(path, "rb") as fh:
            data = fh.read()
        guessed, _ = mimetypes.guess_type(path)
        return cls(data=data, file_name=os.path.basename(path), mime_type=mime_type or guessed)

    @classmethod
    def coerce(cls, value: Union["BinaryInput", bytes, bytearray, str, "os.PathLike[str]"]) -> "BinaryInput":
        """Accept a ``BinaryInput``, raw bytes, or a filesystem path."""
        if isinstance(value, BinaryInput):
            return value
        if isinstance(value, (bytes, bytearray)):
            return cls(data=bytes(value))
        if isinstance(value, (str, os.PathLike)):
            return cls.from_path(os.fspath(value))
        raise TypeError(f"unsupported document type: {type(value).__name__}")

    @property
    def content_type(self) -> str:
        return self.mime_type or DEFAULT_MIME_TYPE

    def multipart(self, default_name: str) -> Tuple[str, bytes, str]:
        """Return the ``(filename, content, content_type)`` tuple httpx expects."""
        return (self.file_name or default_name, self.data, self.content_type)

    def to_data_url(self) -> str:
        """Render the bytes as a base64 ``data:`` URL."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


__all__ = ["BinaryInput"]
