from __future__ import annotations

import json
import sys
import threading
from typing import Any, Literal, TextIO

from pydantic import BaseModel, ConfigDict

from ..core.event import LogEvent
from ..core.render import stylize
from ._config import parse_backend_config

__all__ = ["ConsoleBackend", "ConsoleBackendConfig"]

_LEVEL_STYLES: dict[str, tuple[str, ...]] = {
    "error": ("bold", "red"),
    "warn": ("yellow",),
    "sys": ("magenta",),
    "req": ("cyan",),
    "res": ("blue",),
    "info": ("green",),
    "debug": ("grey",),
}


class ConsoleBackendConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    colors: bool = True
    template: Literal["default", "minimal"] = "default"
    timestamp: bool = False
    uptime: bool = False


def format_data(value: Any) -> str:
    """Render one extra argument for a console line."""
    if isinstance(value, str):
        return value
    if isinstance(value, BaseException):
        return f"{type(value).__name__}: {value}"
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, default=str)
        except (TypeError, ValueError):
            return repr(value)
    return repr(value)


class ConsoleBackend:
    """Writes one human-readable line per event to stdout.

    - ``default`` template: optional timestamp/uptime, padded level tag,
      message, then extra data on the same line
    - ``minimal`` template: level tag and message only, data appended
    - Colours use the decorated message; without colours the plain one
    """

    name = "console"

    def __init__(
        self,
        config: ConsoleBackendConfig | dict | None = None,
        *,
        stream: TextIO | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = parse_backend_config(ConsoleBackendConfig, config, **kwargs)
        self._stream = stream
        self._lock = threading.Lock()

    @property
    def config(self) -> ConsoleBackendConfig:
        return self._config

    def format(self, event: LogEvent) -> str:
        cfg = self._config
        parts: list[str] = []
        if cfg.template == "default":
            if cfg.timestamp:
                parts.append(f"[{event.time.isoformat(timespec='milliseconds')}]")
            if cfg.uptime:
                parts.append(f"[{event.uptime:.3f}s]")
            tag = f"{event.type.upper():<5}"
        else:
            tag = event.type.upper()
        if cfg.colors:
            tag = stylize(tag, *_LEVEL_STYLES.get(event.type, ()))
        parts.append(tag)
        parts.append(event.cmsg if cfg.colors else event.msg)
        parts.extend(format_data(item) for item in event.data)
        return " ".join(parts)

    def log(self, event: LogEvent) -> None:
        line = self.format(event)
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.write(line + "\n")

    def flush(self) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        with self._lock:
            stream.flush()


PLUGIN_METADATA = {
    "name": "console",
    "version": "1.0.0",
    "plugin_type": "backend",
    "entry_point": "logtopus.backends.console:ConsoleBackend",
    "description": "Human-readable console backend.",
    "author": "Logtopus Core",
    "api_version": "1.0",
}
