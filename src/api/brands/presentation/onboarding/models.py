"""Request and response models for onboarding endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from brands.application.value_objects import AnalysisOutcome, AnalysisOutcomeKind
from brands.domain.aggregates import BrandBrain, Evidence
from brands.domain.onboarding import OnboardingStateMachine
from brands.domain.value_objects import (
    BrainSection,
    EvidenceStatus,
    EvidenceType,
    NamedStep,
    OnboardingStatus,
)
from brands.presentation.workspaces.models import WorkspaceResponse
from shared_kernel.envelope import ApiModel

# Brain


class BrainResponse(ApiModel):
    """Full view of a Brand Brain."""

    id: str
    brand_workspace_id: str
    brand_slug: str
    summary: str
    audience: str
    tone: str
    offers: str
    pillars: list[str]
    recommendations: list[str]
    competitors: list[str]
    channels: list[str]
    status: OnboardingStatus
    onboarding_step: int
    is_activated: bool
    analysis_method: str | None = None
    analysis_started_at: datetime | None = None
    analysis_completed_at: datetime | None = None
    last_analyzed_at: datetime | None = None
    analysis_duration_ms: int | None = None
    evidence_count: int = 0
    last_error: str | None = None
    activated_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, brain: BrandBrain) -> BrainResponse:
        """Convert domain BrandBrain aggregate to API response."""
        return cls(
            id=brain.id.value,
            brand_workspace_id=brain.brand_workspace_id.value,
            brand_slug=brain.brand_slug,
            summary=brain.summary,
            audience=brain.audience,
            tone=brain.tone,
            offers=brain.offers,
            pillars=list(brain.pillars),
            recommendations=list(brain.recommendations),
            competitors=list(brain.competitors),
            channels=list(brain.channels),
            status=brain.status,
            onboarding_step=brain.onboarding_step,
            is_activated=brain.is_activated,
            analysis_method=(
                brain.analysis_method.value if brain.analysis_method else None
            ),
            analysis_started_at=brain.analysis_started_at,
            analysis_completed_at=brain.analysis_completed_at,
            last_analyzed_at=brain.last_analyzed_at,
            analysis_duration_ms=brain.analysis_duration_ms,
            evidence_count=brain.evidence_count,
            last_error=brain.last_error,
            activated_at=brain.activated_at,
            created_at=brain.created_at,
            updated_at=brain.updated_at,
        )


class PatchBrainRequest(ApiModel):
    """Partial update of brain sections.

    List sections accept a list of strings or newline-separated text.
    """

    summary: str | None = None
    audience: str | None = None
    tone: str | None = None
    offers: str | None = None
    pillars: list[str] | str | None = None
    recommendations: list[str] | str | None = None
    competitors: list[str] | str | None = None
    channels: list[str] | str | None = None
    status: OnboardingStatus | None = Field(
        default=None, description="Optional status override; the step is kept"
    )

    def section_updates(self) -> dict[BrainSection, Any]:
        """Sections present in the request, with explicit nulls skipped."""
        updates: dict[BrainSection, Any] = {}
        for section in BrainSection:
            if section.value in self.model_fields_set:
                value = getattr(self, section.value)
                if value is not None:
                    updates[section] = value
        return updates


class RefineSectionRequest(ApiModel):
    """Replace one section from free text."""

    section: str = Field(..., description="Section name", examples=["pillars"])
    content: str = Field(..., description="New content; list sections split on newlines")


class ActivationResponse(ApiModel):
    """Result of completing onboarding."""

    brain: BrainResponse
    workspace: WorkspaceResponse
    completed_at: datetime


# Analysis


class AnalyzeRequest(ApiModel):
    """Options for an analysis run."""

    force: bool = Field(
        default=False, description="Reset any in-flight analysis before claiming"
    )
    brand_name_only: bool = Field(
        default=False, description="Analyze from the brand name alone"
    )


class AnalyzeResponse(ApiModel):
    """Outcome of an analysis run."""

    outcome: AnalysisOutcomeKind
    brain: BrainResponse
    reason: str | None = Field(
        default=None, description="Why the placeholder analysis was used"
    )

    @classmethod
    def from_outcome(cls, outcome: AnalysisOutcome) -> AnalyzeResponse:
        return cls(
            outcome=outcome.kind,
            brain=BrainResponse.from_domain(outcome.brain),
            reason=getattr(outcome, "reason", None),
        )


class AnalysisStatusResponse(ApiModel):
    """Analysis progress as seen by pollers."""

    status: OnboardingStatus
    step: int
    analysis_started_at: datetime | None = None
    analysis_completed_at: datetime | None = None
    last_analyzed_at: datetime | None = None
    analysis_method: str | None = None
    last_error: str | None = None
    evidence_count: int = 0

    @classmethod
    def from_domain(cls, brain: BrandBrain | None) -> AnalysisStatusResponse:
        if brain is None:
            initial = OnboardingStateMachine.initial()
            return cls(status=initial.status, step=initial.step)
        return cls(
            status=brain.status,
            step=brain.onboarding_step,
            analysis_started_at=brain.analysis_started_at,
            analysis_completed_at=brain.analysis_completed_at,
            last_analyzed_at=brain.last_analyzed_at,
            analysis_method=(
                brain.analysis_method.value if brain.analysis_method else None
            ),
            last_error=brain.last_error,
            evidence_count=brain.evidence_count,
        )


# State


class NamedStateRequest(ApiModel):
    """Move to a named onboarding step."""

    step: str = Field(..., examples=["collecting_evidence"])


class NamedStateResponse(ApiModel):
    """Onboarding state in named-step form."""

    step: NamedStep
    status: OnboardingStatus
    onboarding_step: int
    is_activated: bool
    updated_at: datetime

    @classmethod
    def from_domain(cls, brain: BrandBrain) -> NamedStateResponse:
        return cls(
            step=OnboardingStateMachine.name_for_step(
                brain.onboarding_step, brain.is_activated
            ),
            status=brain.status,
            onboarding_step=brain.onboarding_step,
            is_activated=brain.is_activated,
            updated_at=brain.updated_at,
        )


class NumericStateRequest(ApiModel):
    """Move to a numeric onboarding step (1-5).

    ``step`` is validated by the state machine so that every bad value gets
    the same message.
    """

    step: Any = Field(..., examples=[2])


class NumericStateResponse(ApiModel):
    """Onboarding state in numeric-step form."""

    step: int
    is_activated: bool

    @classmethod
    def from_domain(cls, brain: BrandBrain) -> NumericStateResponse:
        return cls(step=brain.onboarding_step, is_activated=brain.is_activated)


# Evidence


class AddEvidenceRequest(ApiModel):
    """Submit one evidence item."""

    type: EvidenceType = Field(..., examples=["website"])
    value: str = Field(..., examples=["https://acme.example"])
    metadata: dict[str, Any] | None = None

    @field_validator("type")
    @classmethod
    def _submittable(cls, value: EvidenceType) -> EvidenceType:
        if not value.user_submittable:
            raise ValueError(f"Evidence type '{value.value}' cannot be submitted")
        return value

    @field_validator("value")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Evidence value is required")
        return value


class UpdateEvidenceRequest(ApiModel):
    """Update one evidence item of the brand."""

    id: str
    status: EvidenceStatus | None = None
    analyzed_content: str | None = None
    analysis_summary: str | None = None


class EvidenceResponse(ApiModel):
    """One evidence item."""

    id: str
    brand_slug: str
    type: EvidenceType
    kind: str = Field(..., description="Display kind: url, file, text or search")
    value: str
    status: EvidenceStatus
    analyzed_content: str | None = None
    analysis_summary: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    last_error: str | None = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, evidence: Evidence) -> EvidenceResponse:
        """Convert domain Evidence entity to API response."""
        return cls(
            id=evidence.id.value,
            brand_slug=evidence.brand_slug,
            type=evidence.type,
            kind=evidence.type.display_kind,
            value=evidence.value,
            status=evidence.status,
            analyzed_content=evidence.analyzed_content,
            analysis_summary=evidence.analysis_summary,
            metadata=dict(evidence.metadata),
            last_error=evidence.last_error,
            created_at=evidence.created_at,
            updated_at=evidence.updated_at,
        )


class EvidenceListResponse(ApiModel):
    """Evidence listing, newest first."""

    items: list[EvidenceResponse]
    count: int


class EvidenceDeletedResponse(ApiModel):
    id: str
    deleted: bool = True


# Chat


class ChatRequest(ApiModel):
    """One chat turn."""

    message: str = Field(..., min_length=1)
    step: str = Field(..., examples=["intro"])
    context: Any = None
