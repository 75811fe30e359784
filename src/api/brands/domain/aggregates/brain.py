"""BrandBrain aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from brands.domain.analysis import BrandAnalysis
from brands.domain.onboarding import OnboardingState, OnboardingStateMachine
from brands.domain.value_objects import (
    AnalysisMethod,
    BrainSection,
    BrandBrainId,
    BrandWorkspaceId,
    OnboardingStatus,
)


def split_lines(content: str) -> list[str]:
    """Split on newlines, trim, and drop blank lines, preserving order."""
    return [line.strip() for line in content.splitlines() if line.strip()]


@dataclass
class BrandBrain:
    """The synthesized strategy profile of one brand workspace.

    Keyed by ``brand_workspace_id``; ``brand_slug`` is a denormalized lookup
    field. The brain stays editable after activation.
    """

    id: BrandBrainId
    brand_workspace_id: BrandWorkspaceId
    brand_slug: str
    summary: str = ""
    audience: str = ""
    tone: str = ""
    offers: str = ""
    pillars: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    competitors: list[str] = field(default_factory=list)
    channels: list[str] = field(default_factory=list)
    status: OnboardingStatus = OnboardingStatus.NOT_STARTED
    onboarding_step: int = 1
    is_activated: bool = False
    analysis_method: AnalysisMethod | None = None
    analysis_started_at: datetime | None = None
    analysis_completed_at: datetime | None = None
    last_analyzed_at: datetime | None = None
    analysis_duration_ms: int | None = None
    evidence_count: int = 0
    last_error: str | None = None
    activated_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        OnboardingStateMachine.validate_step(self.onboarding_step)

    @classmethod
    def create_empty(
        cls,
        brand_workspace_id: BrandWorkspaceId,
        brand_slug: str,
    ) -> BrandBrain:
        """Factory method for an empty brain at onboarding step 1."""
        now = datetime.now(UTC)
        return cls(
            id=BrandBrainId.generate(),
            brand_workspace_id=brand_workspace_id,
            brand_slug=brand_slug,
            created_at=now,
            updated_at=now,
        )

    @property
    def state(self) -> OnboardingState:
        return OnboardingState(
            step=self.onboarding_step,
            status=self.status,
            is_activated=self.is_activated,
        )

    @property
    def has_content(self) -> bool:
        return bool(self.summary or self.audience or self.tone or self.pillars)

    def apply_state(self, state: OnboardingState) -> None:
        """Adopt a state computed by the onboarding state machine."""
        if state.is_activated and not self.is_activated:
            self.activated_at = datetime.now(UTC)
        self.onboarding_step = state.step
        self.status = state.status
        self.is_activated = state.is_activated
        self._touch()

    def patch_sections(self, updates: dict[BrainSection, Any]) -> None:
        """Apply a partial section update.

        List sections accept a list of strings or newline-separated text.
        """
        for section, value in updates.items():
            if section.is_list:
                lines = split_lines(value) if isinstance(value, str) else [
                    str(item).strip() for item in value if str(item).strip()
                ]
                setattr(self, section.value, lines)
            else:
                setattr(self, section.value, str(value))
        self._touch()

    def refine_section(self, section: BrainSection, content: str) -> None:
        """Replace one section from free text."""
        if section.is_list:
            setattr(self, section.value, split_lines(content))
        else:
            setattr(self, section.value, content)
        self._touch()

    def apply_analysis(
        self,
        analysis: BrandAnalysis,
        method: AnalysisMethod,
        completed_at: datetime,
        evidence_count: int,
        error: str | None = None,
    ) -> None:
        """Store analysis content and move to ready at step 5."""
        self.summary = analysis.summary
        self.audience = analysis.audience
        self.tone = analysis.tone
        self.offers = analysis.offers
        self.pillars = list(analysis.pillars)
        self.recommendations = list(analysis.recommendations)
        self.competitors = list(analysis.competitors)
        self.channels = list(analysis.channels)
        self.analysis_method = method
        self.analysis_completed_at = completed_at
        self.last_analyzed_at = completed_at
        self.evidence_count = evidence_count
        self.last_error = error
        if self.analysis_started_at is not None:
            elapsed = completed_at - self.analysis_started_at
            self.analysis_duration_ms = max(0, int(elapsed.total_seconds() * 1000))
        self.apply_state(OnboardingStateMachine.complete_analysis(self.state))

    def record_analysis_failure(self, error: str, failed_at: datetime) -> None:
        self.last_error = error
        self.analysis_completed_at = failed_at
        self.apply_state(OnboardingStateMachine.fail_analysis(self.state))

    def reset_analysis(self) -> None:
        self.analysis_started_at = None
        self.analysis_completed_at = None
        self.last_analyzed_at = None
        self.apply_state(OnboardingStateMachine.reset_analysis(self.state))

    def activate(self) -> None:
        """Mark the brain live. Idempotent."""
        self.apply_state(OnboardingStateMachine.activate(self.state))

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
