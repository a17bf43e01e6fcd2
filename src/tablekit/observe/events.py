"""Structured lifecycle events, one NDJSON line each."""

from __future__ import annotations

import sys
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, TextIO

import orjson


class EventEmitter:
    """Emits NDJSON lifecycle events to a stream (stderr by default)."""

    def __init__(self, enabled: bool = False, stream: TextIO | None = None) -> None:
        self.enabled = enabled
        self._stream = stream

    def emit(self, event: str, data: dict[str, Any] | None = None) -> None:
        if not self.enabled:
            return
        payload = {
            "event": event,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "data": data or {},
        }
        stream = self._stream or sys.stderr
        stream.write(orjson.dumps(payload, default=str).decode() + "\n")
        stream.flush()

    @contextmanager
    def timed(self, event: str) -> Iterator[dict[str, Any]]:
        """Emit ``event`` once the block finishes, with its ``duration_ms``.

        The block fills in the yielded dict. Nothing is emitted if it raises.
        """
        data: dict[str, Any] = {}
        start = time.perf_counter()
        yield data
        data["duration_ms"] = int((time.perf_counter() - start) * 1000)
        self.emit(event, data)
