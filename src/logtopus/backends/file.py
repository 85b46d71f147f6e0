from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.event import LogEvent
from ._config import parse_backend_config

__all__ = ["FileBackend", "FileBackendConfig"]


class FileBackendConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    logfile: Path = Path("./logs/app.log")
    encoding: str = "utf-8"
    buffer_size: int = Field(default=1000, ge=1)


class FileBackend:
    """Appends JSON lines to a single log file.

    Lines are buffered in memory and appended on ``flush()``; when the
    buffer reaches ``buffer_size`` it is written synchronously from
    ``log()``. Parent directories are created on first write.
    """

    name = "file"

    def __init__(
        self, config: FileBackendConfig | dict | None = None, **kwargs: Any
    ) -> None:
        self._config = parse_backend_config(FileBackendConfig, config, **kwargs)
        self._lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._buffer: list[str] = []

    @property
    def path(self) -> Path:
        return self._config.logfile

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def log(self, event: LogEvent) -> None:
        line = json.dumps(event.to_dict(), default=str, separators=(",", ":"))
        with self._lock:
            self._buffer.append(line)
            full = len(self._buffer) >= self._config.buffer_size
        if full:
            self._drain()

    async def flush(self) -> None:
        if self._buffer:
            await asyncio.to_thread(self._drain)

    def _drain(self) -> None:
        # Batches are taken and written under one lock so they land in order
        with self._write_lock:
            with self._lock:
                lines, self._buffer = self._buffer, []
            if not lines:
                return
            path = self._config.logfile
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("a", encoding=self._config.encoding) as fh:
                fh.write("\n".join(lines) + "\n")


PLUGIN_METADATA = {
    "name": "file",
    "version": "1.0.0",
    "plugin_type": "backend",
    "entry_point": "logtopus.backends.file:FileBackend",
    "description": "Buffered JSON-lines file backend.",
    "author": "Logtopus Core",
    "api_version": "1.0",
}
