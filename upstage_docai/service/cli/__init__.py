"""docai-cli (package entrypoint).

Wires argument parsing to the handlers in ``cli_actions``; performs no API
logic directly.

Public API re-exports:
- ``main``: CLI entrypoint callable
- ``build_parser``: parser factory used by tests
"""

from __future__ import annotations

import json
import sys
from typing import Callable, Dict, Optional

from ...base.logging import configure_logger
from .cli_actions import (
    handle_chat,
    handle_chat_retrieve,
    handle_chat_upload,
    handle_extract,
    handle_parse,
    handle_parse_result,
    handle_repair,
    handle_schema,
)
from .cli_parser import build_parser
from .cli_utils import parse_verbosity

_HANDLERS: Dict[str, Callable[..., int]] = {
	"parse": handle_parse,
	"parse-result": handle_parse_result,
	"extract": handle_extract,
	"schema": handle_schema,
	"chat-upload": handle_chat_upload,
	"chat-retrieve": handle_chat_retrieve,
	"chat": handle_chat,
	"repair": handle_repair,
}


def main(argv: Optional[list[str]] = None) -> int:
	"""CLI entrypoint.

	Parameters
	----------
	argv: Optional[list[str]]
		Argument vector; when ``None`` uses ``sys.argv[1:]``.

	Returns
	-------
	int
		Process exit code (0 success, 1 service failure, 2 usage error).
	"""
	p = build_parser()
	args = p.parse_args(list(sys.argv[1:] if argv is None else argv))
	if args.log_level:
		level = parse_verbosity(args.log_level)
		if level is None:
			print(json.dumps({"error": f"invalid log level '{args.log_level}'"}), file=sys.stderr)
			return 2
		configure_logger(level=level)
	try:
		return _HANDLERS[args.cmd](args)
	except OSError as e:
		print(json.dumps({"error": str(e)}), file=sys.stderr)
		return 2


if __name__ == "__main__":  # pragma: no cover
	raise SystemExit(main())
