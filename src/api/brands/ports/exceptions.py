"""Domain exceptions for the brands bounded context.

Each derives from the shared error taxonomy so the presentation layer can
map it to a status code, message and machine-readable code.
"""

from __future__ import annotations

from datetime import datetime

from shared_kernel.exceptions import (
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)


class WorkspaceNotFoundError(NotFoundError):
    """Raised when a slug does not name a workspace the caller owns.

    Also used for workspaces owned by someone else, so their existence is
    not revealed.
    """

    default_code = "BRAND_NOT_FOUND"

    def __init__(self, slug: str) -> None:
        super().__init__("Brand not found")
        self.slug = slug


class DuplicateSlugError(ConflictError):
    """Raised when every slug candidate for a workspace name is taken."""

    default_code = "DUPLICATE_SLUG"

    def __init__(self, slug: str) -> None:
        super().__init__(
            "A brand with a similar name already exists. Please choose a different name."
        )
        self.slug = slug


class BrainNotFoundError(NotFoundError):
    """Raised when an operation needs a Brand Brain that does not exist yet."""

    default_code = "BRAIN_NOT_FOUND"

    def __init__(self, slug: str) -> None:
        super().__init__("Brand Brain not found")
        self.slug = slug


class EvidenceNotFoundError(NotFoundError):
    """Raised when no evidence matches both the id and the brand."""

    default_code = "EVIDENCE_NOT_FOUND"

    def __init__(self, evidence_id: str) -> None:
        super().__init__("Evidence not found")
        self.evidence_id = evidence_id


class InvalidSectionError(ValidationError):
    """Raised when refining a section name that does not exist."""

    default_code = "INVALID_SECTION"

    def __init__(self, section: str) -> None:
        super().__init__("Invalid section")
        self.section = section


class InvalidOnboardingStepError(ValidationError):
    """Raised for a numeric step outside 1..5 or an unknown step name."""

    default_code = "INVALID_STEP"


class AnalysisInProgressError(ConflictError):
    """Raised when an analysis is already running for the brand."""

    default_code = "ANALYSIS_IN_PROGRESS"

    def __init__(self, started_at: datetime | None) -> None:
        super().__init__(
            "Analysis already in progress",
            details={"startedAt": started_at.isoformat() if started_at else None},
        )
        self.started_at = started_at


class NoCompleteEvidenceError(ValidationError):
    """Raised when evidence-based analysis finds no complete evidence."""

    default_code = "NO_EVIDENCE"

    def __init__(self) -> None:
        super().__init__(
            "No processed evidence found. Add evidence or run a brand-name-only analysis.",
            details={"suggestion": "brand_name_only"},
        )


class AnalyzerError(ExternalServiceError):
    """Raised when the analyzer or chat model call fails."""

    default_code = "ANALYZER_FAILED"


class AnalyzerTimeoutError(AnalyzerError):
    """Raised when an analyzer call exceeds its timeout."""

    default_code = "ANALYZER_TIMEOUT"


class AnalysisFailedError(ExternalServiceError):
    """Raised at the HTTP edge when an analysis run ended as failed."""

    default_code = "ANALYSIS_FAILED"

    def __init__(self, reason: str) -> None:
        super().__init__("Brand analysis failed. Please try again.")
        self.reason = reason
