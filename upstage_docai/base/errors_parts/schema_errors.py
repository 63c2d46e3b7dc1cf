"""
Response-format validation error.

Raised when a ``response_format`` value lacks the required ``type`` /
``json_schema`` fields, or when every repair stage failed and the final
parse of the untouched input also fails.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from .docai_error import DocAIError
from .error_code import ErrorCode


class InvalidSchemaFormat(DocAIError):
    """Invalid or unrecoverable ``response_format`` / JSON schema input.

    Attributes:
        stage: Name of the repair stage (or check) that produced the failure,
            e.g. ``"fallback"`` or ``"validate"``.
        position: Character offset reported by the JSON decoder, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        position: Optional[int] = None,
        operation: Optional[str] = None,
        raw: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.VALIDATION,
            message=message,
            operation=operation,
            raw=raw,
        )
        self.stage = stage
        self.position = position

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["stage"] = self.stage
        data["position"] = self.position
        return data


__all__ = ["InvalidSchemaFormat"]
