"""
Built-in backends.

Importing this package registers the built-ins with the default resolver
so the default logger config works without extra packages.
Third-party backends are published under the ``logtopus.backends`` entry
point group instead.
"""

from __future__ import annotations

from ..core.loader import register_builtin
from .console import ConsoleBackend, ConsoleBackendConfig
from .file import FileBackend, FileBackendConfig
from .webhook import WebhookBackend, WebhookBackendConfig

register_builtin("console", ConsoleBackend, aliases=["console-logger"])
register_builtin("file", FileBackend, aliases=["file-logger"])
register_builtin("webhook", WebhookBackend, aliases=["webhook-logger"])

__all__ = [
    "ConsoleBackend",
    "ConsoleBackendConfig",
    "FileBackend",
    "FileBackendConfig",
    "WebhookBackend",
    "WebhookBackendConfig",
]
