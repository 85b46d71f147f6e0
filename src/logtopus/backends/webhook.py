"""
Webhook backend.

Collects events in memory and POSTs them as one JSON array per ``flush()``.
Delivery is best-effort: a failed POST surfaces as a flush failure and the
batch is not retried.
"""

from __future__ import annotations

from collections import deque
from typing import Any, Mapping

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..core.event import LogEvent
from ._config import parse_backend_config

__all__ = ["WebhookBackend", "WebhookBackendConfig"]


class WebhookBackendConfig(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    endpoint: str
    secret: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    timeout_seconds: float = Field(default=5.0, gt=0.0)
    max_pending: int = Field(default=10_000, ge=1)

    @field_validator("headers", mode="before")
    @classmethod
    def _coerce_headers(cls, value: Mapping[str, str] | None) -> dict[str, str]:
        if value is None:
            return {}
        return dict(value)


class WebhookBackend:
    """Remote backend that POSTs batched events to a webhook endpoint."""

    name = "webhook"

    def __init__(
        self,
        config: WebhookBackendConfig | dict | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = parse_backend_config(WebhookBackendConfig, config, **kwargs)
        self._transport = transport
        # Oldest events are dropped once max_pending is reached
        self._pending: deque[dict[str, Any]] = deque(maxlen=self._config.max_pending)
        self._last_status: int | None = None

    @property
    def last_status(self) -> int | None:
        return self._last_status

    @property
    def pending(self) -> int:
        return len(self._pending)

    def log(self, event: LogEvent) -> None:
        self._pending.append(event.to_dict())

    async def flush(self) -> None:
        batch = list(self._pending)
        self._pending.clear()
        if not batch:
            return
        headers = dict(self._config.headers)
        if self._config.secret:
            headers.setdefault("X-Webhook-Secret", self._config.secret)
        async with httpx.AsyncClient(
            timeout=self._config.timeout_seconds, transport=self._transport
        ) as client:
            resp = await client.post(self._config.endpoint, json=batch, headers=headers)
        self._last_status = resp.status_code
        resp.raise_for_status()


PLUGIN_METADATA = {
    "name": "webhook",
    "version": "1.0.0",
    "plugin_type": "backend",
    "entry_point": "logtopus.backends.webhook:WebhookBackend",
    "description": "Batched webhook backend (POST JSON array on flush).",
    "author": "Logtopus Core",
    "api_version": "1.0",
}
