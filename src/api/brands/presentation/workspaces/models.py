"""Request and response models for brand workspace endpoints."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from brands.domain.aggregates import BrandWorkspace
from brands.domain.aggregates.workspace import validate_workspace_name
from shared_kernel.envelope import ApiModel


class CreateWorkspaceRequest(ApiModel):
    """Request to create a brand workspace."""

    name: str = Field(
        ..., description="Brand name (2-100 characters)", examples=["Acme Co"]
    )

    @field_validator("name")
    @classmethod
    def _valid_name(cls, value: str) -> str:
        return validate_workspace_name(value)


class WorkspaceSummaryResponse(ApiModel):
    """Workspace entry in a listing."""

    name: str = Field(..., description="Brand name")
    slug: str = Field(..., description="URL-safe unique slug")
    status: str = Field(..., description="Onboarding status")
    onboarding_step: int = Field(..., description="Onboarding step (1-5)")

    @classmethod
    def from_domain(cls, workspace: BrandWorkspace) -> WorkspaceSummaryResponse:
        return cls(
            name=workspace.name,
            slug=workspace.slug,
            status=workspace.status.value,
            onboarding_step=workspace.onboarding_step,
        )


class WorkspaceResponse(ApiModel):
    """Full view of a brand workspace."""

    id: str = Field(..., description="Workspace ID (ULID)")
    name: str = Field(..., description="Brand name")
    slug: str = Field(..., description="URL-safe unique slug")
    ai_thread_id: str = Field(..., description="Conversation thread handle")
    brain_id: str | None = Field(default=None, description="Brand Brain ID")
    status: str = Field(..., description="Onboarding status")
    onboarding_step: int = Field(..., description="Onboarding step (1-5)")
    last_active_at: datetime = Field(..., description="Last activity timestamp")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    @classmethod
    def from_domain(cls, workspace: BrandWorkspace) -> WorkspaceResponse:
        """Convert domain BrandWorkspace aggregate to API response."""
        return cls(
            id=workspace.id.value,
            name=workspace.name,
            slug=workspace.slug,
            ai_thread_id=workspace.ai_thread_id,
            brain_id=workspace.brain_id.value if workspace.brain_id else None,
            status=workspace.status.value,
            onboarding_step=workspace.onboarding_step,
            last_active_at=workspace.last_active_at,
            created_at=workspace.created_at,
            updated_at=workspace.updated_at,
        )


class WorkspaceDeletedResponse(ApiModel):
    """Confirmation of a cascade delete."""

    slug: str
    deleted: bool = True
