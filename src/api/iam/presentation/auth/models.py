"""Request and response models for authentication endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from iam.application.value_objects import SessionGrant
from iam.domain.aggregates import User
from shared_kernel.envelope import ApiModel


class RegisterRequest(ApiModel):
    """Request to create an account."""

    first_name: str = Field(
        ..., min_length=1, max_length=100, description="Given name", examples=["Ada"]
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Family name",
        examples=["Lovelace"],
    )
    email: str = Field(
        ..., max_length=320, description="Login email", examples=["ada@example.com"]
    )
    password: str = Field(
        ..., min_length=8, max_length=256, description="Password (8+ characters)"
    )


class LoginRequest(ApiModel):
    """Request to sign in."""

    email: str = Field(..., min_length=1, description="Login email")
    password: str = Field(..., min_length=1, description="Password")


class PasswordResetRequest(ApiModel):
    """Request a password-reset link."""

    email: str = Field(..., min_length=1, description="Account email")


class PasswordResetCompleteRequest(ApiModel):
    """Set a new password with a reset token."""

    token: str = Field(..., min_length=1, description="Reset token")
    password: str = Field(
        ..., min_length=8, max_length=256, description="New password (8+ characters)"
    )


class UserResponse(ApiModel):
    """Public view of a user account."""

    id: str = Field(..., description="User ID (ULID)")
    email: str = Field(..., description="Normalized login email")
    first_name: str = Field(..., description="Given name")
    last_name: str = Field(..., description="Family name")
    name: str = Field(..., description="Full name")
    onboarding_completed: bool = Field(..., description="Finished onboarding")
    created_at: datetime = Field(..., description="Registration timestamp")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response."""
        return cls(
            id=user.id.value,
            email=user.email.value,
            first_name=user.first_name,
            last_name=user.last_name,
            name=user.full_name,
            onboarding_completed=user.onboarding_completed,
            created_at=user.created_at,
        )


class SessionResponse(ApiModel):
    """Result of a successful register or login."""

    user: UserResponse
    redirect_to: str = Field(
        ..., description="Where the client should navigate next", examples=["/onboarding"]
    )

    @classmethod
    def from_grant(cls, grant: SessionGrant) -> SessionResponse:
        return cls(user=UserResponse.from_domain(grant.user), redirect_to=grant.redirect_to)


class MeResponse(ApiModel):
    """Who the session cookie belongs to, if anyone."""

    authenticated: bool
    user: UserResponse | None = None


class MessageResponse(ApiModel):
    """Plain acknowledgement."""

    message: str
