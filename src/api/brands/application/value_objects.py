"""Result types returned by brands application services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

from brands.domain.aggregates import BrandBrain, BrandWorkspace


class AnalysisOutcomeKind(StrEnum):
    """How an analysis run ended."""

    COMPLETED = "completed"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class AnalysisCompleted:
    """The analyzer produced the stored content."""

    brain: BrandBrain
    kind: AnalysisOutcomeKind = AnalysisOutcomeKind.COMPLETED


@dataclass(frozen=True)
class AnalysisDegraded:
    """The analyzer failed; placeholder content was stored and the brain is ready."""

    brain: BrandBrain
    reason: str
    kind: AnalysisOutcomeKind = AnalysisOutcomeKind.DEGRADED


@dataclass(frozen=True)
class AnalysisFailed:
    """The run failed; the brain went back to evidence collection."""

    brain: BrandBrain
    reason: str
    kind: AnalysisOutcomeKind = AnalysisOutcomeKind.FAILED


AnalysisOutcome = AnalysisCompleted | AnalysisDegraded | AnalysisFailed


@dataclass(frozen=True)
class ActivationResult:
    """State after completing onboarding for a brand."""

    brain: BrandBrain
    workspace: BrandWorkspace
    completed_at: datetime
