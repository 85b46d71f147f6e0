"""Log event record delivered to backends."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any

# Reference point for event uptime; set when the package is first imported
_PROCESS_START = time.monotonic()


def process_uptime() -> float:
    """Seconds elapsed since logtopus was first imported in this process."""
    return time.monotonic() - _PROCESS_START


@dataclass(frozen=True)
class LogEvent:
    """One logical log event, shared by every backend.

    ``msg`` is the plain rendering, ``cmsg`` the decorated one. ``data`` holds
    the extra positional arguments in call order.
    """

    type: str
    msg: str
    cmsg: str
    data: tuple[Any, ...]
    time: datetime
    uptime: float

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "type": self.type,
            "msg": self.msg,
            "data": list(self.data),
            "time": self.time.isoformat(),
            "uptime": self.uptime,
        }
