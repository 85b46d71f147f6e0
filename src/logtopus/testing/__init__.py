"""
Testing utilities for logtopus backends.

Example:
    from logtopus.testing import MockBackend, validate_backend

    def test_my_backend():
        result = validate_backend(MyBackend({}))
        assert result.valid
"""

from .mocks import MockBackend, MockBackendConfig, NoFlushBackend
from .validators import ProtocolViolationError, ValidationResult, validate_backend

__all__ = [
    "MockBackend",
    "MockBackendConfig",
    "NoFlushBackend",
    "ProtocolViolationError",
    "ValidationResult",
    "validate_backend",
]
