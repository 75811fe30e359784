"""Protocol for workspace registry observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class WorkspaceRegistryProbe(Protocol):
    """Domain probe for brand workspace lifecycle operations."""

    def workspace_created(self, workspace_id: str, slug: str, owner_user_id: str) -> None:
        ...

    def workspace_creation_failed(self, name: str, error: str) -> None:
        ...

    def slug_collision_resolved(self, base_slug: str, slug: str, attempts: int) -> None:
        ...

    def workspace_access_denied(self, slug: str, user_id: str) -> None:
        """Slug is unknown or belongs to another owner."""
        ...

    def cache_hit(self, slug: str) -> None:
        ...

    def workspace_deleted(
        self, slug: str, evidence_deleted: int, brains_deleted: int
    ) -> None:
        ...

    def with_context(self, context: ObservationContext) -> WorkspaceRegistryProbe:
        ...


class DefaultWorkspaceRegistryProbe:
    """Default implementation of WorkspaceRegistryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultWorkspaceRegistryProbe:
        return DefaultWorkspaceRegistryProbe(logger=self._logger, context=context)

    def workspace_created(self, workspace_id: str, slug: str, owner_user_id: str) -> None:
        self._logger.info(
            "workspace_created",
            workspace_id=workspace_id,
            slug=slug,
            owner_user_id=owner_user_id,
            **self._get_context_kwargs(),
        )

    def workspace_creation_failed(self, name: str, error: str) -> None:
        self._logger.error(
            "workspace_creation_failed",
            name=name,
            error=error,
            **self._get_context_kwargs(),
        )

    def slug_collision_resolved(self, base_slug: str, slug: str, attempts: int) -> None:
        self._logger.info(
            "slug_collision_resolved",
            base_slug=base_slug,
            slug=slug,
            attempts=attempts,
            **self._get_context_kwargs(),
        )

    def workspace_access_denied(self, slug: str, user_id: str) -> None:
        self._logger.info(
            "workspace_access_denied",
            slug=slug,
            user_id=user_id,
            **self._get_context_kwargs(),
        )

    def cache_hit(self, slug: str) -> None:
        self._logger.debug("workspace_cache_hit", slug=slug, **self._get_context_kwargs())

    def workspace_deleted(
        self, slug: str, evidence_deleted: int, brains_deleted: int
    ) -> None:
        self._logger.info(
            "workspace_deleted",
            slug=slug,
            evidence_deleted=evidence_deleted,
            brains_deleted=brains_deleted,
            **self._get_context_kwargs(),
        )
