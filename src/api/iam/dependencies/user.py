"""FastAPI dependencies for users, sessions and the current user."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
    DefaultUserServiceProbe,
)
from iam.application.services import UserService
from iam.domain.aggregates import User
from iam.infrastructure.reset_notifier import LoggingPasswordResetNotifier
from iam.infrastructure.user_repository import UserRepository
from iam.ports.exceptions import NotAuthenticatedError
from iam.ports.session import IPasswordResetNotifier, ISessionStore
from infrastructure.database.dependencies import get_write_session
from infrastructure.settings import get_session_settings
from shared_kernel.auth import CurrentUser, DefaultSessionTokenProbe, SessionTokenCodec


@lru_cache
def get_session_store() -> ISessionStore:
    """Get the cached session token codec configured from settings."""
    settings = get_session_settings()
    return SessionTokenCodec(
        secret=settings.secret.get_secret_value(),
        probe=DefaultSessionTokenProbe(),
        session_ttl=timedelta(days=settings.ttl_days),
        reset_ttl=timedelta(minutes=settings.reset_token_ttl_minutes),
    )


def get_reset_notifier() -> IPasswordResetNotifier:
    """Get the password-reset delivery adapter."""
    return LoggingPasswordResetNotifier()


def get_authentication_probe() -> AuthenticationProbe:
    """Get AuthenticationProbe instance."""
    return DefaultAuthenticationProbe()


def get_user_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> UserRepository:
    """Get UserRepository instance bound to the request session."""
    return UserRepository(session=session)


def get_user_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    user_repository: Annotated[UserRepository, Depends(get_user_repository)],
    session_store: Annotated[ISessionStore, Depends(get_session_store)],
    reset_notifier: Annotated[IPasswordResetNotifier, Depends(get_reset_notifier)],
) -> UserService:
    """Get UserService instance.

    Args:
        session: Async database session
        user_repository: User repository bound to the same session
        session_store: Signed token codec
        reset_notifier: Password-reset delivery adapter

    Returns:
        UserService instance
    """
    return UserService(
        user_repository=user_repository,
        session=session,
        session_store=session_store,
        reset_notifier=reset_notifier,
        probe=DefaultUserServiceProbe(),
    )


def get_session_cookie_name() -> str:
    """Name of the cookie carrying the session token."""
    return get_session_settings().cookie_name


async def get_optional_user(
    request: Request,
    user_service: Annotated[UserService, Depends(get_user_service)],
    auth_probe: Annotated[AuthenticationProbe, Depends(get_authentication_probe)],
    cookie_name: Annotated[str, Depends(get_session_cookie_name)],
) -> User | None:
    """Resolve the session cookie to a user, or None when absent or invalid."""
    token = request.cookies.get(cookie_name)
    if not token:
        return None
    try:
        user = await user_service.resolve_session(token)
    except NotAuthenticatedError as e:
        auth_probe.authentication_failed(reason=e.message)
        return None
    auth_probe.user_authenticated(user_id=user.id.value)
    return user


async def get_current_user(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> CurrentUser:
    """Require an authenticated user.

    Raises:
        NotAuthenticatedError: If the request has no valid session cookie
    """
    if user is None:
        raise NotAuthenticatedError()
    return CurrentUser(user_id=user.id.value, email=user.email.value)
