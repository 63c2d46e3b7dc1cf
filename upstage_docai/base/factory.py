"""Client factory.

Create API clients by service name without importing every client module up
front. Modules are imported lazily with ``importlib``; the factory performs no
I/O and no retries. It either returns a client or raises
:class:`UnknownServiceError` with an actionable message.

Supported services: ``document_parsing``, ``information_extraction``,
``document_chat`` (hyphenated spellings are accepted too).
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Tuple, Type


class UnknownServiceError(Exception):
    """Raised when a service name cannot be resolved or its client fails to build."""


class ClientFactory:
    """Create service clients from a canonical name (e.g. ``"document_chat"``)."""

    _SERVICES: Dict[str, Dict[str, str]] = {
        "document_parsing": {"module": "upstage_docai.document_parsing.client", "class": "DocumentParsingClient"},
        "information_extraction": {
            "module": "upstage_docai.information_extraction.client",
            "class": "InformationExtractionClient",
        },
        "document_chat": {"module": "upstage_docai.document_chat.client", "class": "DocumentChatClient"},
    }

    @classmethod
    def create(cls, service: str, **kwargs: Any) -> Any:
        """Instantiate the client for ``service`` with ``kwargs``.

        Raises
        ------
        UnknownServiceError
            Unknown name, import failure, missing class, or bad constructor
            arguments.
        """
        name = (service or "").lower().strip().replace("-", "_")
        spec = cls._SERVICES.get(name)
        if not spec:
            raise UnknownServiceError(f"Unknown service '{service}' (expected one of {', '.join(cls.supported())})")

        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:
            raise UnknownServiceError(f"Failed to import module '{module_path}' for service '{service}': {exc}") from exc
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownServiceError(f"Client class '{class_name}' not found in '{module_path}'") from exc
        try:
            return klass(**kwargs)
        except TypeError as exc:
            raise UnknownServiceError(f"Invalid arguments for '{name}' client: {exc}") from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        return tuple(cls._SERVICES.keys())


__all__ = ["ClientFactory", "UnknownServiceError"]
