"""Authentication shared kernel module."""

from shared_kernel.auth.current_user import CurrentUser
from shared_kernel.auth.observability import (
    DefaultSessionTokenProbe,
    SessionTokenProbe,
)
from shared_kernel.auth.session_tokens import (
    InvalidTokenError,
    SessionTokenCodec,
    TokenClaims,
    TokenPurpose,
)

__all__ = [
    "CurrentUser",
    "DefaultSessionTokenProbe",
    "InvalidTokenError",
    "SessionTokenCodec",
    "SessionTokenProbe",
    "TokenClaims",
    "TokenPurpose",
]
