"""CLI action handlers.

Purpose
-------
One handler per subcommand. Each takes the parsed ``argparse.Namespace`` and
an optional pre-built client (tests inject clients backed by
``httpx.MockTransport``), prints JSON or streamed text to stdout, and returns
a process exit code.

Fallback & Error Semantics
--------------------------
- :class:`DocAIError` is printed as JSON to stderr. Validation and
  authentication failures exit with ``2``; anything else from the service
  exits with ``1``.
- Multi-file commands go through :func:`run_items`; with
  ``--continue-on-fail`` failed files appear as error records in the output
  and the exit code is ``1`` if any failed.
- ``repair`` performs no network I/O.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from ...base.cancellation import CancellationToken
from ...base.errors import DocAIError, ErrorCode
from ...base.factory import ClientFactory
from ...base.json_repair import parse_response_format, repair_json_detailed
from ...base.logging import LogContext, get_logger, normalized_log_event
from ...base.streaming import DeltaPolicy
from ..batch import ItemResult, run_items
from .cli_utils import emit_json, read_text_arg

_logger = get_logger("docai.cli")

_USAGE_CODES = (ErrorCode.VALIDATION, ErrorCode.AUTH)


def report_error(err: DocAIError) -> int:
    """Print ``err`` as JSON to stderr and return the matching exit code."""
    print(json.dumps(err.to_dict()), file=sys.stderr)
    return 2 if err.code in _USAGE_CODES else 1


def make_client(args: argparse.Namespace, service: str) -> Any:
    """Build a client for ``service`` honouring ``--api-key``/``--base-url``."""
    return ClientFactory.create(
        service,
        api_key=getattr(args, "api_key", None),
        base_url=getattr(args, "base_url", None),
    )


def _batch_output(results: List[ItemResult]) -> int:
    emit_json([{"item": r.paired_item, "json": r.json} for r in results])
    return 1 if any(r.error for r in results) else 0


def handle_parse(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``parse``: digitise each file (or submit async jobs)."""
    client = client or make_client(args, "document_parsing")
    options: Dict[str, Any] = {
        "model": args.model,
        "ocr": args.ocr,
        "output_formats": args.output_formats,
        "coordinates": args.coordinates,
        "chart_recognition": args.chart_recognition,
        "base64_encoding": args.base64_encoding,
        "merge_multipage_tables": args.merge_multipage_tables,
    }

    def _one(path: str, _index: int) -> Any:
        if args.submit_async:
            return client.submit_async(path, **options)
        return client.parse(path, return_mode=args.return_mode, **options)

    try:
        results = run_items(args.files, _one, continue_on_fail=args.continue_on_fail, operation_name="document_parse")
    except DocAIError as e:
        return report_error(e)
    return _batch_output(results)


def handle_parse_result(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``parse-result``: fetch one async job or list all of them."""
    client = client or make_client(args, "document_parsing")
    try:
        if args.request_id:
            emit_json(client.get_async_result(args.request_id))
        else:
            emit_json(client.list_async_requests())
    except DocAIError as e:
        return report_error(e)
    return 0


def handle_extract(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``extract``."""
    client = client or make_client(args, "information_extraction")
    try:
        result = client.extract(
            document=args.file,
            image_url=args.image_url,
            schema=read_text_arg(args.schema) if args.schema else None,
            schema_name=args.schema_name,
            response_format=read_text_arg(args.response_format) if args.response_format else None,
            model=args.model,
            pages_per_chunk=args.pages_per_chunk,
            return_mode="full" if args.full else "extracted",
        )
    except DocAIError as e:
        return report_error(e)
    emit_json(result)
    return 0


def handle_schema(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``schema``."""
    client = client or make_client(args, "information_extraction")
    try:
        result = client.generate_schema(
            document=args.file,
            image_url=args.image_url,
            prompt=args.prompt,
            model=args.model,
            return_mode="full" if args.full else "schema",
        )
    except DocAIError as e:
        return report_error(e)
    emit_json(result)
    return 0


def handle_chat_upload(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``chat-upload`` for every file."""
    client = client or make_client(args, "document_chat")
    try:
        results = run_items(
            args.files,
            lambda path, _i: client.upload_file(path, purpose=args.purpose),
            continue_on_fail=args.continue_on_fail,
            operation_name="document_chat_upload",
        )
    except DocAIError as e:
        return report_error(e)
    return _batch_output(results)


def handle_chat_retrieve(args: argparse.Namespace, *, client: Any = None) -> int:
    """Execute ``chat-retrieve``."""
    client = client or make_client(args, "document_chat")
    try:
        emit_json(client.retrieve_file(args.file_id, pages=args.pages, view=args.view))
    except DocAIError as e:
        return report_error(e)
    return 0


def handle_chat(args: argparse.Namespace, *, client: Any = None, token: Optional[CancellationToken] = None) -> int:
    """Execute ``chat``; with ``--stream`` text is printed as it arrives.

    In streaming mode the answer goes to stdout unformatted, and a JSON line
    with usage and conversation id follows on stderr. Ctrl-C cancels the
    stream and exits with ``130``.
    """
    client = client or make_client(args, "document_chat")
    options: Dict[str, Any] = {
        "model": args.model,
        "conversation_id": args.conversation_id,
        "reasoning_effort": args.reasoning_effort,
        "reasoning_summary": args.reasoning_summary,
        "temperature": args.temperature,
    }
    if not args.stream:
        try:
            emit_json(client.get_response(args.file_ids, args.query, **options))
        except DocAIError as e:
            return report_error(e)
        return 0

    token = token or CancellationToken()
    ctx = LogContext(operation="cli.chat")
    normalized_log_event(_logger, "cli.start", ctx, phase="start", stream=True)
    try:
        deltas = client.stream_response(
            args.file_ids, args.query, token=token, policy=DeltaPolicy(reasoning=args.reasoning_policy), **options
        )
        terminal = None
        try:
            for delta in deltas:
                if delta.finish:
                    terminal = delta
                    break
                prefix = "[reasoning] " if delta.kind == "reasoning" else ""
                sys.stdout.write(prefix + delta.text)
                sys.stdout.flush()
        except KeyboardInterrupt:
            token.cancel("interrupted")
            sys.stdout.write("\n")
            return 130
        finally:
            deltas.close()
    except DocAIError as e:
        sys.stdout.write("\n")
        return report_error(e)
    sys.stdout.write("\n")
    summary = {
        "usage": terminal.usage if terminal else None,
        "conversation_id": terminal.conversation_id if terminal else None,
        "error": terminal.error if terminal else None,
    }
    print(json.dumps(summary), file=sys.stderr)
    normalized_log_event(_logger, "cli.finalize", ctx, phase="finalize", tokens=summary["usage"])
    return 1 if summary["error"] else 0


def handle_repair(args: argparse.Namespace, *, stdin: Any = None) -> int:
    """Execute ``repair``: report the repair stage and the parsed value."""
    text = read_text_arg(args.text, stdin=stdin)
    if args.response_format:
        try:
            emit_json({"ok": True, "value": parse_response_format(text, operation="cli.repair")})
        except DocAIError as e:
            return report_error(e)
        return 0
    outcome = repair_json_detailed(text, required=())
    emit_json(
        {
            "ok": outcome.ok,
            "stage": outcome.stage,
            "repaired": outcome.repaired,
            "value": outcome.value if outcome.ok else None,
            "error": outcome.error,
            "position": outcome.position,
        }
    )
    return 0 if outcome.ok else 1


__all__ = [
    "report_error",
    "make_client",
    "handle_parse",
    "handle_parse_result",
    "handle_extract",
    "handle_schema",
    "handle_chat_upload",
    "handle_chat_retrieve",
    "handle_chat",
    "handle_repair",
]
