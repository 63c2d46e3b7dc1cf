"""CLI parser construction for docai-cli.

This module wires subparsers but contains no execution logic. Subcommand
handlers live in ``cli_actions``.
"""

from __future__ import annotations

import argparse

from ...config.defaults import (
    DOCAI_CLI_PROG,
    DOCUMENT_PARSE_BASE64_CATEGORIES,
    DOCUMENT_PARSE_OCR_MODES,
    DOCUMENT_PARSE_OUTPUT_FORMATS,
    DOCUMENT_PARSE_RETURN_MODES,
    INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME,
    REASONING_EFFORTS,
    REASONING_SUMMARIES,
)

COMMANDS = ("parse", "parse-result", "extract", "schema", "chat-upload", "chat-retrieve", "chat", "repair")


def _str2bool(v: str | None) -> bool:
    """Best-effort conversion of common truthy/falsey strings to bool.

    Parameters
    ----------
    v: str | None
        Incoming string value (e.g., "true", "false", "1", "0"). When ``None``
        and used via argparse with ``const=True``, this returns ``True``.

    Returns
    -------
    bool
        Parsed boolean value with a permissive mapping for typical CLI inputs.
    """
    if v is None:
        return True
    val = v.strip().lower()
    if val in {"1", "t", "true", "y", "yes", "on"}:
        return True
    return False if val in {"0", "f", "false", "n", "no", "off"} else bool(val)


def add_stream_flags(parser: argparse.ArgumentParser) -> None:
    """Attach ``--stream``/``--no-stream`` flags to a parser.

    ``--stream`` accepts an optional boolean (``--stream``, ``--stream true``,
    ``--stream false``); ``--no-stream`` is the explicit negation.
    """
    grp = parser.add_mutually_exclusive_group()
    grp.add_argument("--stream", nargs="?", const=True, type=_str2bool, default=False)
    grp.add_argument("--no-stream", dest="stream", action="store_false")


def _add_document_source(parser: argparse.ArgumentParser) -> None:
    src = parser.add_mutually_exclusive_group(required=True)
    src.add_argument("--file", dest="file", default=None, help="Local document or image")
    src.add_argument("--image-url", dest="image_url", default=None, help="Public URL or data: URL")


def build_parser() -> argparse.ArgumentParser:
    """Construct the top-level CLI parser and subcommands.

    Returns
    -------
    argparse.ArgumentParser
        Parser for every subcommand in :data:`COMMANDS`. No I/O happens here.
    """
    p = argparse.ArgumentParser(prog=DOCAI_CLI_PROG, description="Upstage document-AI command line client")
    p.add_argument("--api-key", default=None, help="Overrides UPSTAGE_API_KEY")
    p.add_argument("--base-url", default=None, help="Overrides UPSTAGE_BASE_URL")
    p.add_argument("--log-level", default=None, help="debug, info, warning, error or a synonym such as quiet")
    sub = p.add_subparsers(dest="cmd", required=True)

    # parse
    p_parse = sub.add_parser("parse", help="Digitise one or more documents")
    p_parse.add_argument("files", nargs="+")
    p_parse.add_argument("--model", default=None)
    p_parse.add_argument("--ocr", choices=DOCUMENT_PARSE_OCR_MODES, default="auto")
    p_parse.add_argument("--output-formats", nargs="+", choices=DOCUMENT_PARSE_OUTPUT_FORMATS, default=["html"])
    p_parse.add_argument("--coordinates", nargs="?", const=True, type=_str2bool, default=True)
    p_parse.add_argument("--chart-recognition", nargs="?", const=True, type=_str2bool, default=True)
    p_parse.add_argument("--base64-encoding", nargs="*", choices=DOCUMENT_PARSE_BASE64_CATEGORIES, default=[])
    p_parse.add_argument("--merge-multipage-tables", action="store_true")
    p_parse.add_argument("--return-mode", choices=DOCUMENT_PARSE_RETURN_MODES, default="full")
    p_parse.add_argument("--async", dest="submit_async", action="store_true", help="Submit async jobs only")
    p_parse.add_argument("--continue-on-fail", action="store_true")

    # parse-result
    p_result = sub.add_parser("parse-result", help="Fetch an async parse result, or list jobs when no id is given")
    p_result.add_argument("request_id", nargs="?", default=None)

    # extract
    p_extract = sub.add_parser("extract", help="Extract structured data with a JSON schema")
    _add_document_source(p_extract)
    fmt = p_extract.add_mutually_exclusive_group(required=True)
    fmt.add_argument("--schema", default=None, help="JSON schema text, or @path")
    fmt.add_argument("--response-format", default=None, help="Full response_format JSON text, or @path")
    p_extract.add_argument("--schema-name", default=INFORMATION_EXTRACT_DEFAULT_SCHEMA_NAME)
    p_extract.add_argument("--model", default=None)
    p_extract.add_argument("--pages-per-chunk", type=int, default=0)
    p_extract.add_argument("--full", action="store_true", help="Print the raw response")

    # schema
    p_schema = sub.add_parser("schema", help="Ask the service to propose an extraction schema")
    _add_document_source(p_schema)
    p_schema.add_argument("--prompt", default="")
    p_schema.add_argument("--model", default=None)
    p_schema.add_argument("--full", action="store_true", help="Print the raw response")

    # chat-upload
    p_upload = sub.add_parser("chat-upload", help="Upload files for document chat")
    p_upload.add_argument("files", nargs="+")
    p_upload.add_argument("--purpose", default="user_data")
    p_upload.add_argument("--continue-on-fail", action="store_true")

    # chat-retrieve
    p_retrieve = sub.add_parser("chat-retrieve", help="Show an uploaded file")
    p_retrieve.add_argument("file_id")
    p_retrieve.add_argument("--pages", default=None)
    p_retrieve.add_argument("--view", default=None)

    # chat
    p_chat = sub.add_parser("chat", help="Ask a question about uploaded files")
    p_chat.add_argument("--file-ids", required=True, help="Comma-separated file ids")
    p_chat.add_argument("--query", required=True)
    p_chat.add_argument("--model", default=None)
    p_chat.add_argument("--conversation-id", default=None)
    p_chat.add_argument("--reasoning-effort", choices=REASONING_EFFORTS, default=None)
    p_chat.add_argument("--reasoning-summary", choices=REASONING_SUMMARIES, default=None)
    p_chat.add_argument("--reasoning-policy", choices=("fallback", "separate", "ignore"), default="fallback")
    p_chat.add_argument("--temperature", type=float, default=None)
    add_stream_flags(p_chat)

    # repair (offline)
    p_repair = sub.add_parser("repair", help="Repair near-JSON text offline")
    p_repair.add_argument("text", nargs="?", default="-", help="Text, @path, or - for stdin")
    p_repair.add_argument("--response-format", action="store_true",
                          help="Validate as a response_format object")

    return p


__all__ = ["COMMANDS", "_str2bool", "add_stream_flags", "build_parser"]
