"""
Pydantic models for the ``response_format`` object of extraction requests.

Shape::

    {"type": "json_schema", "json_schema": {"name": "...", "schema": {...}}}

Unknown keys (for example ``strict``) are preserved on both levels so a
caller-supplied object survives validation unchanged.
"""
from __future__ import annotations

from typing import Any, Dict, Literal

from pydantic import BaseModel, ConfigDict, Field


class JsonSchemaSpec(BaseModel):
    """Named JSON schema. ``schema`` is exposed as ``schema_`` in Python."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    schema_: Dict[str, Any] = Field(..., alias="schema")


class ResponseFormatSpec(BaseModel):
    """Structured-output request; ``type`` is always ``json_schema``."""

    model_config = ConfigDict(extra="allow")

    type: Literal["json_schema"] = "json_schema"
    json_schema: JsonSchemaSpec

    @classmethod
    def from_schema(cls, schema: Dict[str, Any], name: str) -> "ResponseFormatSpec":
        return cls(json_schema=JsonSchemaSpec(name=name, schema=schema))

    def to_payload(self) -> Dict[str, Any]:
        """Serialize with wire field names."""
        return self.model_dump(by_alias=True)


__all__ = ["JsonSchemaSpec", "ResponseFormatSpec"]
