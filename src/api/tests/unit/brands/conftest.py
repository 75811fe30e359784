"""Shared fixtures for brands unit tests."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.value_objects import (
    AnalysisMethod,
    EvidenceStatus,
    EvidenceType,
    OnboardingStatus,
)

OWNER_ID = "01JAAAAAAAAAAAAAAAAAAAAAAA"


@pytest.fixture
def mock_session():
    """Mock AsyncSession whose begin() works as an async context manager."""
    session = AsyncMock()
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=transaction)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture
def workspace() -> BrandWorkspace:
    """Workspace "Acme Co" owned by OWNER_ID."""
    return BrandWorkspace.create(owner_user_id=OWNER_ID, name="Acme Co", slug="acme-co")


@pytest.fixture
def brain(workspace) -> BrandBrain:
    """Empty brain linked to the workspace fixture."""
    brain = BrandBrain.create_empty(
        brand_workspace_id=workspace.id, brand_slug=workspace.slug
    )
    workspace.link_brain(brain.id)
    return brain


@pytest.fixture
def make_evidence(workspace):
    """Factory for evidence items of the workspace fixture."""

    def _make(
        value: str = "We sell eco-friendly packaging",
        type: EvidenceType = EvidenceType.MANUAL,
        status: EvidenceStatus = EvidenceStatus.COMPLETE,
    ) -> Evidence:
        return Evidence.submit(
            brand_workspace_id=workspace.id,
            brand_slug=workspace.slug,
            type=type,
            value=value,
            status=status,
        )

    return _make


@pytest.fixture
def claim_brain():
    """Put a brain in the state a granted analysis claim leaves it in."""

    def _claim(
        brain: BrandBrain,
        method: AnalysisMethod = AnalysisMethod.LLM_EVIDENCE,
        started_at: datetime | None = None,
    ) -> BrandBrain:
        brain.onboarding_step = 4
        brain.status = OnboardingStatus.IN_PROGRESS
        brain.analysis_method = method
        brain.analysis_started_at = started_at or datetime.now(UTC)
        brain.analysis_completed_at = None
        brain.last_error = None
        return brain

    return _claim
