"""Pytest configuration for the upstage_docai test suite.

Provides fixtures for building API clients on ``httpx.MockTransport`` and a
session finalizer that closes pooled HTTP clients to reduce ResourceWarnings.
"""

from __future__ import annotations

import atexit
import json
import logging
from contextlib import suppress
from typing import Any, Callable, Dict, Iterator, List

import httpx
import pytest

from upstage_docai.base.http import close_all_clients
from upstage_docai.config import reset_config_cache

TEST_BASE_URL = "https://docai.test/v1"
TEST_API_KEY = "up_unit_key"


class ListHandler(logging.Handler):
    """Capture log records into a list for assertions."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.messages: List[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())

    def events(self) -> List[Dict[str, Any]]:
        out = []
        for m in self.messages:
            with suppress(ValueError):
                out.append(json.loads(m))
        return out


@pytest.fixture()
def capture_logger() -> Iterator[tuple]:
    """Yield ``(logger, handler)``: a DEBUG logger isolated from the ``docai`` tree."""
    logger = logging.getLogger("docai_tests.capture")
    handler = ListHandler()
    logger.handlers[:] = [handler]
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    yield logger, handler
    logger.handlers[:] = []


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Keep real credentials, config files and .env out of every test."""
    for name in (
        "UPSTAGE_API_KEY",
        "DOCAI_API_KEY",
        "UPSTAGE_BASE_URL",
        "UPSTAGE_PARSE_MODEL",
        "UPSTAGE_EXTRACT_MODEL",
        "UPSTAGE_CHAT_MODEL",
        "DOCAI_CONFIG_FILE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    reset_config_cache()
    yield
    reset_config_cache()


@pytest.fixture()
def make_client() -> Callable[..., Any]:
    """Return ``build(cls, handler)`` creating a client wired to a MockTransport.

    ``handler`` receives each ``httpx.Request`` and returns an ``httpx.Response``.
    """
    opened: List[httpx.Client] = []

    def _build(cls, handler: Callable[[httpx.Request], httpx.Response], **kwargs: Any) -> Any:
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        opened.append(http_client)
        kwargs.setdefault("api_key", TEST_API_KEY)
        kwargs.setdefault("base_url", TEST_BASE_URL)
        return cls(http_client=http_client, **kwargs)

    yield _build
    for c in opened:
        c.close()


@pytest.fixture(scope="session", autouse=True)
def close_http_clients_after_session() -> Iterator[None]:
    """Ensure pooled HTTP clients are closed after the test session."""

    def _cleanup() -> None:
        with suppress(Exception):  # teardown must not fail tests
            close_all_clients()

    yield
    _cleanup()
    atexit.register(_cleanup)
