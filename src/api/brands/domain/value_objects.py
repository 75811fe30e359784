"""Value objects for the brands domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from ulid import ULID


@dataclass(frozen=True)
class _UlidIdentifier:
    """Base for ULID-backed aggregate identifiers."""

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create identifier from string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e
        return cls(value=value)


@dataclass(frozen=True)
class BrandWorkspaceId(_UlidIdentifier):
    """Identifier for a BrandWorkspace aggregate."""


@dataclass(frozen=True)
class BrandBrainId(_UlidIdentifier):
    """Identifier for a BrandBrain aggregate."""


@dataclass(frozen=True)
class EvidenceId(_UlidIdentifier):
    """Identifier for an Evidence item."""


class OnboardingStatus(StrEnum):
    """Coarse onboarding status shared by workspaces and brains."""

    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    FAILED = "failed"


class NamedStep(StrEnum):
    """Onboarding steps as named by the chat and state endpoints."""

    INTRO = "intro"
    COLLECTING_EVIDENCE = "collecting_evidence"
    WAITING_FOR_ANALYSIS = "waiting_for_analysis"
    ANALYZING = "analyzing"
    REVIEWING_BRAND_BRAIN = "reviewing_brand_brain"
    COMPLETE = "complete"


class EvidenceType(StrEnum):
    """Kinds of evidence a brand can be analyzed from."""

    WEBSITE = "website"
    DOCUMENT = "document"
    SOCIAL = "social"
    MANUAL = "manual"
    BRAND_NAME_SEARCH = "brand_name_search"

    @property
    def user_submittable(self) -> bool:
        """brand_name_search items are only recorded by analysis runs."""
        return self is not EvidenceType.BRAND_NAME_SEARCH

    @property
    def display_kind(self) -> str:
        """Coarser kind shown by evidence listings."""
        return _DISPLAY_KINDS[self]


_DISPLAY_KINDS = {
    EvidenceType.WEBSITE: "url",
    EvidenceType.DOCUMENT: "file",
    EvidenceType.SOCIAL: "text",
    EvidenceType.MANUAL: "text",
    EvidenceType.BRAND_NAME_SEARCH: "search",
}


class EvidenceStatus(StrEnum):
    """Processing status of an evidence item."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETE = "complete"
    FAILED = "failed"


class BrainSection(StrEnum):
    """Editable sections of a Brand Brain."""

    SUMMARY = "summary"
    AUDIENCE = "audience"
    TONE = "tone"
    PILLARS = "pillars"
    RECOMMENDATIONS = "recommendations"
    OFFERS = "offers"
    COMPETITORS = "competitors"
    CHANNELS = "channels"

    @property
    def is_list(self) -> bool:
        """Whether the section holds a list of lines rather than free text."""
        return self in LIST_SECTIONS


LIST_SECTIONS = frozenset(
    {
        BrainSection.PILLARS,
        BrainSection.RECOMMENDATIONS,
        BrainSection.COMPETITORS,
        BrainSection.CHANNELS,
    }
)


class AnalysisMethod(StrEnum):
    """How the current Brand Brain content was produced."""

    LLM_EVIDENCE = "llm_evidence"
    LLM_BRAND_NAME = "llm_brand_name"
    PLACEHOLDER = "placeholder"
