"""Incremental Server-Sent-Events decoder for the document-chat stream.

``SSEChunkDecoder`` owns the per-connection decoder state: an incremental
UTF-8 decoder (which holds back partial multi-byte sequences between chunks)
and the trailing, not yet newline-terminated line. ``feed`` returns the JSON
frames of the lines completed by a chunk; ``close`` flushes both buffers.

Line handling:
    - blank lines, ``event:`` lines and anything not starting with ``data: ``
      are skipped;
    - a ``[DONE]`` payload marks the end of data for that frame only;
    - a payload that is not a JSON object is logged at DEBUG as a
      ``MalformedFrame`` and skipped. The stream is never aborted for it.
"""
from __future__ import annotations

import codecs
import json
import logging
from typing import Any, Dict, List, Optional

from ..errors import MalformedFrame
from ..logging import LogContext, get_logger, log_event

DATA_PREFIX = "data: "
EVENT_PREFIX = "event:"
DONE_SENTINEL = "[DONE]"


class SSEChunkDecoder:
    """Stateful byte-chunk to JSON-frame decoder for one stream."""

    def __init__(self, *, logger: Optional[logging.Logger] = None, ctx: Optional[LogContext] = None) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._logger = logger or get_logger("docai.streaming")
        self._ctx = ctx
        self.line_count = 0
        self.malformed_count = 0
        self.done_seen = False

    @property
    def pending(self) -> str:
        """Incomplete trailing line carried to the next ``feed``."""
        return self._pending

    def feed(self, chunk: bytes) -> List[Dict[str, Any]]:
        """Decode ``chunk`` and return frames for every line it completes."""
        if not chunk:
            return []
        buffer = self._pending + self._decoder.decode(chunk)
        *lines, self._pending = buffer.split("\n")
        return self._frames(lines)

    def close(self) -> List[Dict[str, Any]]:
        """Flush the decoder and process a final unterminated line."""
        tail = self._pending + self._decoder.decode(b"", final=True)
        self._pending = ""
        return self._frames(tail.split("\n")) if tail else []

    def _frames(self, lines: List[str]) -> List[Dict[str, Any]]:
        frames: List[Dict[str, Any]] = []
        for line in lines:
            self.line_count += 1
            frame = self._parse_line(line.rstrip("\r"))
            if frame is not None:
                frames.append(frame)
        return frames

    def _parse_line(self, line: str) -> Optional[Dict[str, Any]]:
        if not line.strip() or line.startswith(EVENT_PREFIX) or not line.startswith(DATA_PREFIX):
            return None
        payload = line[len(DATA_PREFIX):].strip()
        if payload == DONE_SENTINEL:
            self.done_seen = True
            return None
        try:
            frame = json.loads(payload)
        except json.JSONDecodeError as e:
            self._report(MalformedFrame(e.msg, line_number=self.line_count, position=e.pos, payload=payload, raw=e))
            return None
        if not isinstance(frame, dict):
            self._report(MalformedFrame("frame is not a JSON object", line_number=self.line_count, payload=payload))
            return None
        return frame

    def _report(self, err: MalformedFrame) -> None:
        self.malformed_count += 1
        log_event(self._logger, "stream.malformed_frame", self._ctx, level=logging.DEBUG, **err.to_dict())


__all__ = ["SSEChunkDecoder", "DATA_PREFIX", "DONE_SENTINEL"]
