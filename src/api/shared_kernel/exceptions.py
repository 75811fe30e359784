"""Error taxonomy shared by all bounded contexts.

Every exception a port or application service raises toward the presentation
layer derives from one of these classes. Each class carries the HTTP status it
maps to and an optional machine-readable ``code`` that clients can branch on.
"""

from __future__ import annotations

from typing import Any


class BrandBrainError(Exception):
    """Base class for all expected application errors."""

    status_code: int = 500
    default_code: str | None = None

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details


class ValidationError(BrandBrainError):
    """Raised when input is malformed or missing."""

    status_code = 400


class AuthenticationError(BrandBrainError):
    """Raised when the request carries no session or an invalid one."""

    status_code = 401


class AuthorizationError(BrandBrainError):
    """Raised when a valid session targets a resource it does not own.

    Rendered as 404 so a resource's existence is not revealed to non-owners.
    """

    status_code = 404


class NotFoundError(BrandBrainError):
    """Raised when the requested resource does not exist."""

    status_code = 404


class ConflictError(BrandBrainError):
    """Raised for duplicates and operations already running."""

    status_code = 409


class ExternalServiceError(BrandBrainError):
    """Raised when an outbound collaborator (analyzer, chat model) fails."""

    status_code = 500


class InternalError(BrandBrainError):
    """Raised for persistence and other unexpected failures."""

    status_code = 500
