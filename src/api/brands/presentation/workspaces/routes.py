"""Brand workspace routes: create, list, read, delete."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from brands.application.services import WorkspaceRegistry
from brands.dependencies.workspace import get_owned_workspace, get_workspace_registry
from brands.domain.aggregates import BrandWorkspace
from brands.ports.exceptions import DuplicateSlugError, WorkspaceNotFoundError
from brands.presentation.workspaces.models import (
    CreateWorkspaceRequest,
    WorkspaceDeletedResponse,
    WorkspaceResponse,
    WorkspaceSummaryResponse,
)
from iam.dependencies.user import get_current_user
from shared_kernel.auth import CurrentUser
from shared_kernel.envelope import SuccessEnvelope
from shared_kernel.exceptions import ValidationError
from shared_kernel.middleware import http_error

router = APIRouter(
    prefix="/brand-workspaces",
    tags=["brand-workspaces"],
)

brand_router = APIRouter(
    prefix="/brands",
    tags=["brand-workspaces"],
)


@router.post(
    "/create",
    response_model=SuccessEnvelope[WorkspaceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a brand workspace",
    responses={
        201: {"description": "Workspace and empty Brand Brain created"},
        400: {"description": "Invalid name"},
        401: {"description": "Not authenticated"},
        409: {"description": "No free slug for this name"},
    },
)
async def create_workspace(
    request: CreateWorkspaceRequest,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
) -> SuccessEnvelope[WorkspaceResponse]:
    """Create a workspace owned by the current user."""
    try:
        workspace = await registry.create_workspace(
            owner_user_id=current_user.user_id, name=request.name
        )
    except (ValidationError, DuplicateSlugError) as e:
        raise http_error(e) from e

    return SuccessEnvelope(data=WorkspaceResponse.from_domain(workspace))


@router.get(
    "",
    response_model=SuccessEnvelope[list[WorkspaceSummaryResponse]],
    summary="List my brand workspaces",
)
async def list_workspaces(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
) -> SuccessEnvelope[list[WorkspaceSummaryResponse]]:
    """Workspaces of the current user in creation order."""
    workspaces = await registry.list_workspaces(current_user.user_id)
    return SuccessEnvelope(
        data=[WorkspaceSummaryResponse.from_domain(w) for w in workspaces]
    )


@router.get(
    "/{slug}",
    response_model=SuccessEnvelope[WorkspaceResponse],
    summary="Get a brand workspace",
    responses={404: {"description": "Not found or not owned"}},
)
async def get_workspace(
    workspace: Annotated[BrandWorkspace, Depends(get_owned_workspace)],
) -> SuccessEnvelope[WorkspaceResponse]:
    """Workspace detail."""
    return SuccessEnvelope(data=WorkspaceResponse.from_domain(workspace))


@router.delete(
    "/{slug}",
    response_model=SuccessEnvelope[WorkspaceDeletedResponse],
    summary="Delete a brand workspace",
    description="Deletes the workspace together with its evidence and Brand Brain.",
    responses={404: {"description": "Not found or not owned"}},
)
async def delete_workspace(
    slug: str,
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
) -> SuccessEnvelope[WorkspaceDeletedResponse]:
    """Cascade-delete a workspace the current user owns."""
    try:
        await registry.delete_workspace(slug, current_user.user_id)
    except WorkspaceNotFoundError as e:
        raise http_error(e) from e

    return SuccessEnvelope(data=WorkspaceDeletedResponse(slug=slug))


@brand_router.get(
    "/{slug}",
    response_model=SuccessEnvelope[WorkspaceResponse],
    summary="Get a brand",
    responses={404: {"description": "Not found or not owned"}},
)
async def get_brand(
    workspace: Annotated[BrandWorkspace, Depends(get_owned_workspace)],
) -> SuccessEnvelope[WorkspaceResponse]:
    """Same workspace detail, addressed by brand slug."""
    return SuccessEnvelope(data=WorkspaceResponse.from_domain(workspace))
