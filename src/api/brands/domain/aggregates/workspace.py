"""BrandWorkspace aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from ulid import ULID

from brands.domain.onboarding import OnboardingState, OnboardingStateMachine
from brands.domain.value_objects import (
    BrandBrainId,
    BrandWorkspaceId,
    OnboardingStatus,
)

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100


def validate_workspace_name(name: str) -> str:
    """Return the trimmed name.

    Raises:
        ValueError: If the trimmed name is shorter than 2 or longer than 100 characters
    """
    trimmed = name.strip()
    if len(trimmed) < MIN_NAME_LENGTH:
        raise ValueError(
            f"Brand name must be at least {MIN_NAME_LENGTH} characters long."
        )
    if len(trimmed) > MAX_NAME_LENGTH:
        raise ValueError(
            f"Brand name must be at most {MAX_NAME_LENGTH} characters long."
        )
    return trimmed


@dataclass
class BrandWorkspace:
    """A tenant's container for one brand.

    Exactly one user owns a workspace; ``(owner_user_id, slug)`` is the
    access predicate for every nested resource. ``status`` and
    ``onboarding_step`` mirror the workspace's Brand Brain.
    """

    id: BrandWorkspaceId
    owner_user_id: str
    name: str
    slug: str
    ai_thread_id: str
    status: OnboardingStatus = OnboardingStatus.NOT_STARTED
    onboarding_step: int = 1
    brain_id: BrandBrainId | None = None
    last_active_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        self.name = validate_workspace_name(self.name)
        if not self.slug:
            raise ValueError("Workspace slug cannot be empty")
        if not self.owner_user_id:
            raise ValueError("Workspace owner is required")
        OnboardingStateMachine.validate_step(self.onboarding_step)

    @classmethod
    def create(cls, owner_user_id: str, name: str, slug: str) -> BrandWorkspace:
        """Factory method for a new workspace at onboarding step 1."""
        now = datetime.now(UTC)
        return cls(
            id=BrandWorkspaceId.generate(),
            owner_user_id=owner_user_id,
            name=name,
            slug=slug,
            ai_thread_id=f"thread_{ULID()}",
            last_active_at=now,
            created_at=now,
            updated_at=now,
        )

    def is_owned_by(self, user_id: str) -> bool:
        return self.owner_user_id == user_id

    def link_brain(self, brain_id: BrandBrainId) -> None:
        self.brain_id = brain_id
        self.updated_at = datetime.now(UTC)

    def mirror(self, state: OnboardingState) -> None:
        """Copy the brain's status and step onto the workspace."""
        self.status = state.status
        self.onboarding_step = state.step
        self.touch()

    def touch(self) -> None:
        """Record activity on the workspace or anything nested in it."""
        now = datetime.now(UTC)
        self.last_active_at = now
        self.updated_at = now
