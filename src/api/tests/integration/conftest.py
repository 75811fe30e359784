"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance. Tables are created
from the ORM metadata and emptied around each test.
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import brands.infrastructure.models  # noqa: F401
import iam.infrastructure.models  # noqa: F401
from iam.application.security import hash_password
from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress
from iam.infrastructure.user_repository import UserRepository
from infrastructure.database.engines import create_engine
from infrastructure.database.models import Base
from infrastructure.settings import DatabaseSettings

TABLES = ("evidence", "brand_brains", "brand_workspaces", "users")


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        BRANDBRAIN_DB_HOST, BRANDBRAIN_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("BRANDBRAIN_DB_HOST", "localhost"),
        port=int(os.getenv("BRANDBRAIN_DB_PORT", "5432")),
        database=os.getenv("BRANDBRAIN_DB_DATABASE", "brandbrain_test"),
        username=os.getenv("BRANDBRAIN_DB_USERNAME", "brandbrain"),
        password=SecretStr(
            os.getenv("BRANDBRAIN_DB_PASSWORD", "brandbrain_dev_password")
        ),
        pool_size=5,
        _env_file=None,
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    """Engine with the schema in place and every table emptied."""
    engine = create_engine(integration_db_settings)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(f"TRUNCATE {', '.join(TABLES)} CASCADE"))

    yield engine

    async with engine.begin() as conn:
        await conn.execute(text(f"TRUNCATE {', '.join(TABLES)} CASCADE"))
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory for tests that need several independent sessions."""
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def owner(async_session: AsyncSession) -> User:
    """A persisted user who owns the workspaces under test."""
    user = User.register(
        email=EmailAddress.parse("owner@acme.example"),
        password_hash=hash_password("correct horse battery"),
        first_name="Olive",
        last_name="Owner",
    )
    async with async_session.begin():
        await UserRepository(session=async_session).save(user)
    return user
