"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors raised by the IAM ports and
application services. Each derives from the shared error taxonomy so the
presentation layer can map it to a status code and message.
"""

from shared_kernel.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


class EmailAlreadyRegisteredError(ConflictError):
    """Raised when registering with an email that already has an account."""

    default_code = "EMAIL_TAKEN"

    def __init__(self) -> None:
        super().__init__("An account with this email already exists.")


class InvalidCredentialsError(AuthenticationError):
    """Raised on login with an unknown email or a wrong password.

    Both cases share one message so the response does not reveal which
    emails are registered.
    """

    default_code = "INVALID_CREDENTIALS"

    def __init__(self) -> None:
        super().__init__("Incorrect email or password.")


class NotAuthenticatedError(AuthenticationError):
    """Raised when a request has no valid session cookie."""

    default_code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "Not authenticated") -> None:
        super().__init__(message)


class InvalidResetTokenError(ValidationError):
    """Raised when a password-reset token is invalid, expired, or already used."""

    default_code = "INVALID_RESET_TOKEN"

    def __init__(self) -> None:
        super().__init__("This password reset link is invalid or has expired.")


class UserNotFoundError(NotFoundError):
    """Raised when an operation targets a user id that does not exist."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id
