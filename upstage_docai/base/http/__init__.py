"""HTTP utilities: pooled httpx clients and response helpers."""

from .client import get_httpx_client, close_all_clients
from .responses import build_headers, ensure_success, read_json, status_error, transport_error

__all__ = [
    "get_httpx_client",
    "close_all_clients",
    "build_headers",
    "ensure_success",
    "read_json",
    "status_error",
    "transport_error",
]
