"""FastAPI/Starlette integration (requires the ``fastapi`` extra)."""

from .middleware import LoggingMiddleware

__all__ = ["LoggingMiddleware"]
