"""Signed session and password-reset tokens.

Tokens are HS256 JWTs signed with the application's session secret. A
``purpose`` claim keeps a reset token from being replayed as a session
token and vice versa.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import SessionTokenProbe

_ALGORITHM = "HS256"


class TokenPurpose(StrEnum):
    """What a signed token may be used for."""

    SESSION = "session"
    PASSWORD_RESET = "password_reset"


@dataclass(frozen=True)
class TokenClaims:
    """Verified token claims."""

    user_id: str
    purpose: TokenPurpose
    issued_at: datetime
    expires_at: datetime
    fingerprint: str | None = None


class InvalidTokenError(Exception):
    """Raised when a token is malformed, expired, or has the wrong purpose."""

    pass


class SessionTokenCodec:
    """Issues and verifies signed tokens bound to a user id."""

    def __init__(
        self,
        secret: str,
        probe: SessionTokenProbe,
        session_ttl: timedelta = timedelta(days=7),
        reset_ttl: timedelta = timedelta(minutes=30),
    ):
        """Initialize the codec.

        Args:
            secret: HMAC signing secret.
            probe: Observability probe for logging events.
            session_ttl: Lifetime of session tokens (default: 7 days).
            reset_ttl: Lifetime of password-reset tokens (default: 30 minutes).
        """
        self._secret = secret
        self._probe = probe
        self._session_ttl = session_ttl
        self._reset_ttl = reset_ttl

    @property
    def session_ttl(self) -> timedelta:
        return self._session_ttl

    def create_session(self, user_id: str) -> str:
        """Issue a session token for a user."""
        return self._encode(user_id, TokenPurpose.SESSION, self._session_ttl)

    def verify_session(self, token: str) -> TokenClaims:
        """Verify a session token.

        Raises:
            InvalidTokenError: If the token cannot be used as a session.
        """
        return self._decode(token, TokenPurpose.SESSION)

    def issue_reset_token(self, user_id: str, fingerprint: str) -> str:
        """Issue a short-lived password-reset token.

        Args:
            user_id: The account the token resets.
            fingerprint: Digest of the current password hash; the token stops
                verifying once the password changes.
        """
        return self._encode(
            user_id,
            TokenPurpose.PASSWORD_RESET,
            self._reset_ttl,
            fingerprint=fingerprint,
        )

    def verify_reset_token(self, token: str) -> TokenClaims:
        """Verify a password-reset token.

        Raises:
            InvalidTokenError: If the token cannot be used for a reset.
        """
        claims = self._decode(token, TokenPurpose.PASSWORD_RESET)
        if claims.fingerprint is None:
            self._probe.token_rejected(reason="Missing fingerprint")
            raise InvalidTokenError("Invalid reset token")
        return claims

    def _encode(
        self,
        user_id: str,
        purpose: TokenPurpose,
        ttl: timedelta,
        fingerprint: str | None = None,
    ) -> str:
        now = datetime.now(tz=timezone.utc)
        payload: dict[str, Any] = {
            "sub": user_id,
            "purpose": purpose.value,
            "iat": int(now.timestamp()),
            "exp": int((now + ttl).timestamp()),
        }
        if fingerprint is not None:
            payload["fp"] = fingerprint
        token = jwt.encode(payload, self._secret, algorithm=_ALGORITHM)
        self._probe.token_issued(user_id=user_id, purpose=purpose.value)
        return token

    def _decode(self, token: str, purpose: TokenPurpose) -> TokenClaims:
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"verify_exp": True, "verify_iat": True},
            )
        except ExpiredSignatureError as e:
            self._probe.token_rejected(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTError as e:
            self._probe.token_rejected(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        if claims.get("purpose") != purpose.value:
            self._probe.token_rejected(reason="Wrong token purpose")
            raise InvalidTokenError("Invalid token purpose")

        user_id = claims.get("sub")
        if not user_id:
            self._probe.token_rejected(reason="Missing sub claim")
            raise InvalidTokenError("Missing required claim: sub")

        return TokenClaims(
            user_id=str(user_id),
            purpose=purpose,
            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
            fingerprint=claims.get("fp"),
        )
