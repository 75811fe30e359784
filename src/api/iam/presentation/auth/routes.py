"""Session lifecycle routes: register, login, logout, me, password reset."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status

from iam.application.services import UserService
from iam.application.value_objects import SessionGrant
from iam.dependencies.user import (
    get_optional_user,
    get_session_cookie_name,
    get_user_service,
)
from iam.domain.aggregates import User
from iam.ports.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    InvalidResetTokenError,
)
from iam.presentation.auth.models import (
    LoginRequest,
    MeResponse,
    MessageResponse,
    PasswordResetCompleteRequest,
    PasswordResetRequest,
    RegisterRequest,
    SessionResponse,
    UserResponse,
)
from infrastructure.settings import get_session_settings
from shared_kernel.envelope import SuccessEnvelope
from shared_kernel.exceptions import ValidationError
from shared_kernel.middleware import http_error

router = APIRouter(
    prefix="/auth",
    tags=["auth"],
)

RESET_ACK = "If an account exists for that email, a reset link has been sent."


def _set_session_cookie(response: Response, grant: SessionGrant, cookie_name: str) -> None:
    response.set_cookie(
        key=cookie_name,
        value=grant.token,
        max_age=grant.max_age_seconds,
        httponly=True,
        secure=get_session_settings().secure_cookie,
        samesite="lax",
        path="/",
    )


@router.post(
    "/register",
    response_model=SuccessEnvelope[SessionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={
        201: {"description": "Account created and session cookie set"},
        400: {"description": "Validation error"},
        409: {"description": "Email already registered"},
    },
)
async def register(
    request: RegisterRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
    cookie_name: Annotated[str, Depends(get_session_cookie_name)],
) -> SuccessEnvelope[SessionResponse]:
    """Register a user and sign them in."""
    try:
        grant = await service.register(
            first_name=request.first_name,
            last_name=request.last_name,
            email=request.email,
            password=request.password,
        )
    except (EmailAlreadyRegisteredError, ValidationError) as e:
        raise http_error(e) from e

    _set_session_cookie(response, grant, cookie_name)
    return SuccessEnvelope(data=SessionResponse.from_grant(grant))


@router.post(
    "/login",
    response_model=SuccessEnvelope[SessionResponse],
    summary="Sign in",
    responses={
        200: {"description": "Signed in and session cookie set"},
        401: {"description": "Incorrect email or password"},
    },
)
async def login(
    request: LoginRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
    cookie_name: Annotated[str, Depends(get_session_cookie_name)],
) -> SuccessEnvelope[SessionResponse]:
    """Verify credentials and set the session cookie."""
    try:
        grant = await service.login(email=request.email, password=request.password)
    except InvalidCredentialsError as e:
        raise http_error(e) from e

    _set_session_cookie(response, grant, cookie_name)
    return SuccessEnvelope(data=SessionResponse.from_grant(grant))


@router.post(
    "/logout",
    response_model=SuccessEnvelope[MessageResponse],
    summary="Sign out",
)
async def logout(
    response: Response,
    cookie_name: Annotated[str, Depends(get_session_cookie_name)],
) -> SuccessEnvelope[MessageResponse]:
    """Clear the session cookie. Safe to call without a session."""
    response.delete_cookie(key=cookie_name, path="/", httponly=True, samesite="lax")
    return SuccessEnvelope(data=MessageResponse(message="Signed out"))


@router.get(
    "/me",
    response_model=SuccessEnvelope[MeResponse],
    summary="Current session",
    description="Never returns 401; reports `authenticated: false` instead.",
)
async def me(
    user: Annotated[User | None, Depends(get_optional_user)],
) -> SuccessEnvelope[MeResponse]:
    """Describe the signed-in user, if any."""
    if user is None:
        return SuccessEnvelope(data=MeResponse(authenticated=False))
    return SuccessEnvelope(
        data=MeResponse(authenticated=True, user=UserResponse.from_domain(user))
    )


@router.post(
    "/reset",
    response_model=SuccessEnvelope[MessageResponse],
    summary="Request a password reset",
    description="Always succeeds so the response does not reveal registered emails.",
)
async def request_password_reset(
    request: PasswordResetRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessEnvelope[MessageResponse]:
    """Issue a reset token when the account exists."""
    await service.request_password_reset(request.email)
    return SuccessEnvelope(data=MessageResponse(message=RESET_ACK))


@router.post(
    "/reset/complete",
    response_model=SuccessEnvelope[MessageResponse],
    summary="Set a new password",
    responses={400: {"description": "Invalid or expired reset token"}},
)
async def complete_password_reset(
    request: PasswordResetCompleteRequest,
    service: Annotated[UserService, Depends(get_user_service)],
) -> SuccessEnvelope[MessageResponse]:
    """Change the password using a reset token."""
    try:
        await service.complete_password_reset(request.token, request.password)
    except (InvalidResetTokenError, ValidationError) as e:
        raise http_error(e) from e

    return SuccessEnvelope(data=MessageResponse(message="Password updated"))
