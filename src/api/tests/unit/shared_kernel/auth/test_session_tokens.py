"""Unit tests for signed session and password-reset tokens."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import create_autospec

import pytest
from jose import jwt

from shared_kernel.auth.observability import SessionTokenProbe
from shared_kernel.auth.session_tokens import (
    InvalidTokenError,
    SessionTokenCodec,
    TokenPurpose,
)

SECRET = "unit-test-secret-0123456789"
USER_ID = "01JBBBBBBBBBBBBBBBBBBBBBBB"


@pytest.fixture
def mock_probe():
    return create_autospec(SessionTokenProbe, instance=True)


@pytest.fixture
def codec(mock_probe) -> SessionTokenCodec:
    return SessionTokenCodec(secret=SECRET, probe=mock_probe)


def forge(payload: dict, secret: str = SECRET) -> str:
    now = datetime.now(tz=timezone.utc)
    claims = {
        "sub": USER_ID,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(hours=1)).timestamp()),
    }
    claims.update(payload)
    return jwt.encode(claims, secret, algorithm="HS256")


class TestSessionTokens:
    """Tests for create_session and verify_session."""

    def test_round_trip(self, codec, mock_probe):
        token = codec.create_session(USER_ID)

        claims = codec.verify_session(token)

        assert claims.user_id == USER_ID
        assert claims.purpose is TokenPurpose.SESSION
        assert claims.fingerprint is None
        assert claims.expires_at - claims.issued_at == timedelta(days=7)
        mock_probe.token_issued.assert_called_once_with(
            user_id=USER_ID, purpose="session"
        )

    def test_custom_ttl(self, mock_probe):
        codec = SessionTokenCodec(
            secret=SECRET, probe=mock_probe, session_ttl=timedelta(hours=2)
        )

        claims = codec.verify_session(codec.create_session(USER_ID))

        assert codec.session_ttl == timedelta(hours=2)
        assert claims.expires_at - claims.issued_at == timedelta(hours=2)

    def test_expired_token(self, codec, mock_probe):
        past = datetime.now(tz=timezone.utc) - timedelta(hours=2)
        token = forge(
            {
                "purpose": "session",
                "iat": int(past.timestamp()),
                "exp": int((past + timedelta(hours=1)).timestamp()),
            }
        )

        with pytest.raises(InvalidTokenError, match="expired"):
            codec.verify_session(token)

        mock_probe.token_rejected.assert_called_once_with(reason="Token expired")

    def test_wrong_secret(self, codec):
        token = forge({"purpose": "session"}, secret="another-secret-0123456789")

        with pytest.raises(InvalidTokenError, match="Invalid token"):
            codec.verify_session(token)

    def test_garbage(self, codec):
        with pytest.raises(InvalidTokenError):
            codec.verify_session("not.a.jwt")

    def test_reset_token_is_not_a_session(self, codec, mock_probe):
        token = codec.issue_reset_token(USER_ID, "abc123")

        with pytest.raises(InvalidTokenError, match="purpose"):
            codec.verify_session(token)

        mock_probe.token_rejected.assert_called_once_with(reason="Wrong token purpose")

    def test_missing_subject(self, codec):
        token = forge({"purpose": "session", "sub": ""})

        with pytest.raises(InvalidTokenError, match="sub"):
            codec.verify_session(token)


class TestResetTokens:
    """Tests for issue_reset_token and verify_reset_token."""

    def test_round_trip_carries_fingerprint(self, codec):
        token = codec.issue_reset_token(USER_ID, "abc123")

        claims = codec.verify_reset_token(token)

        assert claims.user_id == USER_ID
        assert claims.purpose is TokenPurpose.PASSWORD_RESET
        assert claims.fingerprint == "abc123"
        assert claims.expires_at - claims.issued_at == timedelta(minutes=30)

    def test_session_token_cannot_reset(self, codec):
        token = codec.create_session(USER_ID)

        with pytest.raises(InvalidTokenError):
            codec.verify_reset_token(token)

    def test_missing_fingerprint(self, codec, mock_probe):
        token = forge({"purpose": "password_reset"})

        with pytest.raises(InvalidTokenError, match="reset token"):
            codec.verify_reset_token(token)

        mock_probe.token_rejected.assert_called_once_with(reason="Missing fingerprint")
