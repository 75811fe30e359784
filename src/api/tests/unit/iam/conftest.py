"""Shared fixtures for IAM unit tests."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from iam.application.security import hash_password
from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress

PASSWORD = "correct horse battery"


@pytest.fixture
def mock_session():
    """Mock AsyncSession whose begin() works as an async context manager."""
    session = AsyncMock()
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture(scope="session")
def password_hash() -> str:
    """bcrypt hash of the shared test password, computed once."""
    return hash_password(PASSWORD)


@pytest.fixture
def user(password_hash) -> User:
    """Registered user ada@example.com with the shared test password."""
    return User.register(
        email=EmailAddress.parse("ada@example.com"),
        password_hash=password_hash,
        first_name="Ada",
        last_name="Lovelace",
    )
