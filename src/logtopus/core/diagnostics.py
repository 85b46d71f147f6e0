"""
Internal diagnostics for the facade's own lifecycle.

Diagnostics are independent of application log levels: they describe what
logtopus itself is doing (loading backends, timing writes, containing
failures). Output is one JSON object per line on stderr, and only when the
owning facade was constructed in debug mode.

Example:
    diag = Diagnostics(enabled=True)
    diag.warn("loader", "backend resolution failed", backend="file", error="...")
"""

from __future__ import annotations

import json
import sys
from typing import Any, TextIO


class Diagnostics:
    """Structured, best-effort writer for internal events."""

    def __init__(self, enabled: bool = False, *, stream: TextIO | None = None) -> None:
        self._enabled = bool(enabled)
        self._stream = stream

    @property
    def enabled(self) -> bool:
        return self._enabled

    def debug(self, component: str, message: str, **fields: Any) -> None:
        self._emit("DEBUG", component, message, fields)

    def info(self, component: str, message: str, **fields: Any) -> None:
        self._emit("INFO", component, message, fields)

    def warn(self, component: str, message: str, **fields: Any) -> None:
        self._emit("WARN", component, message, fields)

    def _emit(
        self, level: str, component: str, message: str, fields: dict[str, Any]
    ) -> None:
        if not self._enabled:
            return
        payload: dict[str, Any] = {
            "logtopus": component,
            "level": level,
            "message": message,
        }
        payload.update(fields)
        try:
            line = json.dumps(payload, default=str, separators=(",", ":"))
            stream = self._stream if self._stream is not None else sys.stderr
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            # Diagnostics must never break the caller
            return


# Shared instance for code paths with no facade at hand
DISABLED = Diagnostics(enabled=False)
