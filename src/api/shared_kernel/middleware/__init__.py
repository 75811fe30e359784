"""Shared middleware for cross-cutting concerns.

Exception handlers that give every endpoint the same error envelope.
"""

from shared_kernel.middleware.error_handlers import (
    http_error,
    register_error_handlers,
)

__all__ = [
    "http_error",
    "register_error_handlers",
]
