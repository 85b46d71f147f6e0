"""
Request/response logging middleware for FastAPI and Starlette apps.

Each request produces a ``req`` event on entry and a ``res`` event once the
response is ready. An unhandled exception is logged as ``error`` and
re-raised.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Iterable

from starlette.middleware.base import BaseHTTPMiddleware

from ..core.timer import format_elapsed

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.types import ASGIApp

    from ..core.facade import Logtopus

STATE_KEY = "logtopus_logger"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Write ``req``/``res`` events through a logtopus facade.

    The facade is taken from the ``logger`` argument, then from
    ``app.state.logtopus_logger``, and finally from ``get_logger("http")``.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        logger: Logtopus | None = None,
        skip_paths: Iterable[str] | None = None,
    ) -> None:
        super().__init__(app)
        self._logger = logger
        self._skip_paths = set(skip_paths or [])

    def _get_logger(self, request: Request) -> Logtopus:
        if self._logger is not None:
            return self._logger
        state = getattr(getattr(request, "app", None), "state", None)
        candidate = getattr(state, STATE_KEY, None) if state is not None else None
        if candidate is not None:
            return candidate  # type: ignore[no-any-return]
        from .. import get_logger

        self._logger = get_logger("http")
        return self._logger

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        path = request.url.path
        if path in self._skip_paths:
            return await call_next(request)

        logger = self._get_logger(request)
        method = request.method
        logger.req(f"{method} {path}", _client_host(request))

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            elapsed = time.perf_counter() - start
            logger.error(f"{method} {path} failed after {format_elapsed(elapsed)}", exc)
            raise

        elapsed = time.perf_counter() - start
        logger.res(_response_line(method, path, response, elapsed))
        return response


def _client_host(request: Any) -> str | None:
    client = getattr(request, "client", None)
    return getattr(client, "host", None) if client is not None else None


def _response_line(method: str, path: str, response: Any, elapsed: float) -> str:
    headers = getattr(response, "headers", None) or {}
    parts = [str(response.status_code), method, path]
    content_type = headers.get("content-type")
    if content_type:
        parts.append(content_type)
    content_length = headers.get("content-length")
    if content_length:
        parts.append(f"{content_length}b")
    parts.append(format_elapsed(elapsed))
    return " ".join(parts)
