"""Unit tests for BrandWorkspace, BrandBrain and Evidence aggregates."""

from datetime import UTC, datetime, timedelta

import pytest

from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.analysis import normalize_analysis
from brands.domain.onboarding import InvalidStepError, OnboardingStateMachine
from brands.domain.value_objects import (
    AnalysisMethod,
    BrainSection,
    BrandBrainId,
    BrandWorkspaceId,
    EvidenceStatus,
    EvidenceType,
    OnboardingStatus,
)


@pytest.fixture
def workspace() -> BrandWorkspace:
    return BrandWorkspace.create(owner_user_id="user-a", name="Acme Co", slug="acme-co")


@pytest.fixture
def brain(workspace) -> BrandBrain:
    return BrandBrain.create_empty(brand_workspace_id=workspace.id, brand_slug="acme-co")


class TestBrandWorkspace:
    """Tests for BrandWorkspace."""

    def test_create_starts_at_step_one(self, workspace):
        assert workspace.status is OnboardingStatus.NOT_STARTED
        assert workspace.onboarding_step == 1
        assert workspace.brain_id is None
        assert workspace.ai_thread_id.startswith("thread_")

    def test_name_is_trimmed(self):
        workspace = BrandWorkspace.create("user-a", "  Acme  ", "acme")

        assert workspace.name == "Acme"

    @pytest.mark.parametrize("name", ["", " a ", "x" * 101])
    def test_rejects_bad_names(self, name):
        with pytest.raises(ValueError):
            BrandWorkspace.create("user-a", name, "slug")

    def test_ownership(self, workspace):
        assert workspace.is_owned_by("user-a") is True
        assert workspace.is_owned_by("user-b") is False

    def test_mirror_copies_state_and_touches(self, workspace):
        before = workspace.last_active_at
        state = OnboardingStateMachine.advance(OnboardingStateMachine.initial(), 4)

        workspace.mirror(state)

        assert workspace.onboarding_step == 4
        assert workspace.status is OnboardingStatus.IN_PROGRESS
        assert workspace.last_active_at >= before


class TestBrandBrainSections:
    """Tests for section editing."""

    def test_refine_list_section_splits_lines(self, brain):
        brain.refine_section(BrainSection.PILLARS, "A\nB\n\nC")

        assert brain.pillars == ["A", "B", "C"]

    def test_refine_text_section_keeps_content(self, brain):
        brain.refine_section(BrainSection.SUMMARY, "Line one\nLine two")

        assert brain.summary == "Line one\nLine two"

    def test_patch_accepts_lists_and_text(self, brain):
        brain.patch_sections(
            {
                BrainSection.CHANNELS: ["Web", " ", "Email "],
                BrainSection.COMPETITORS: "PackCo\n\nBoxly",
                BrainSection.TONE: "Warm",
            }
        )

        assert brain.channels == ["Web", "Email"]
        assert brain.competitors == ["PackCo", "Boxly"]
        assert brain.tone == "Warm"

    def test_has_content(self, brain):
        assert brain.has_content is False

        brain.refine_section(BrainSection.TONE, "Bold")

        assert brain.has_content is True

    def test_rejects_invalid_step(self, workspace):
        with pytest.raises(InvalidStepError):
            BrandBrain(
                id=BrandBrainId.generate(),
                brand_workspace_id=workspace.id,
                brand_slug="x",
                onboarding_step=6,
            )


class TestBrandBrainAnalysis:
    """Tests for the analysis lifecycle on the aggregate."""

    def test_apply_analysis_moves_to_ready(self, brain, claim_brain):
        started = datetime.now(UTC)
        claim_brain(brain, started_at=started)
        assert (brain.onboarding_step, brain.status) == (4, OnboardingStatus.IN_PROGRESS)

        brain.apply_analysis(
            normalize_analysis({"summary": "Eco", "pillars": ["A", "B", "C", "D"]}),
            method=AnalysisMethod.LLM_EVIDENCE,
            completed_at=started + timedelta(milliseconds=1500),
            evidence_count=2,
        )

        assert brain.status is OnboardingStatus.READY
        assert brain.onboarding_step == 5
        assert brain.summary == "Eco"
        assert 3 <= len(brain.pillars) <= 5
        assert brain.analysis_duration_ms == 1500
        assert brain.evidence_count == 2
        assert brain.last_analyzed_at == started + timedelta(milliseconds=1500)
        assert brain.is_activated is False

    def test_failure_returns_to_step_two(self, brain, claim_brain):
        now = datetime.now(UTC)
        claim_brain(brain, started_at=now)

        brain.record_analysis_failure("boom", now)

        assert (brain.onboarding_step, brain.status) == (2, OnboardingStatus.FAILED)
        assert brain.last_error == "boom"

    def test_reset_clears_timestamps(self, brain, claim_brain):
        now = datetime.now(UTC)
        claim_brain(brain, started_at=now)

        brain.reset_analysis()

        assert (brain.onboarding_step, brain.status) == (3, OnboardingStatus.NOT_STARTED)
        assert brain.analysis_started_at is None
        assert brain.analysis_completed_at is None
        assert brain.last_analyzed_at is None

    def test_activate_is_idempotent(self, brain):
        brain.activate()
        first_activated_at = brain.activated_at

        brain.activate()

        assert brain.is_activated is True
        assert brain.status is OnboardingStatus.READY
        assert brain.onboarding_step == 5
        assert brain.activated_at == first_activated_at

    def test_section_refinement_allowed_after_activation(self, brain):
        brain.activate()

        brain.refine_section(BrainSection.OFFERS, "New offer")

        assert brain.offers == "New offer"
        assert brain.is_activated is True


class TestEvidence:
    """Tests for Evidence."""

    def _submit(self, value="We sell eco-friendly packaging"):
        return Evidence.submit(
            brand_workspace_id=BrandWorkspaceId.generate(),
            brand_slug="acme-co",
            type=EvidenceType.MANUAL,
            value=value,
        )

    def test_submit_is_pending(self):
        evidence = self._submit()

        assert evidence.status is EvidenceStatus.PENDING
        assert evidence.is_complete is False

    def test_rejects_blank_value(self):
        with pytest.raises(ValueError):
            self._submit("   ")

    def test_complete_sets_content(self):
        evidence = self._submit()
        evidence.fail("earlier")

        evidence.complete("Structured notes", summary="Notes")

        assert evidence.is_complete is True
        assert evidence.content == "Structured notes"
        assert evidence.analysis_summary == "Notes"
        assert evidence.last_error is None

    def test_content_falls_back_to_value(self):
        evidence = self._submit("raw text")

        assert evidence.content == "raw text"

    def test_display_kinds(self):
        assert EvidenceType.WEBSITE.display_kind == "url"
        assert EvidenceType.DOCUMENT.display_kind == "file"
        assert EvidenceType.SOCIAL.display_kind == "text"
        assert EvidenceType.MANUAL.display_kind == "text"
        assert EvidenceType.BRAND_NAME_SEARCH.display_kind == "search"
        assert EvidenceType.BRAND_NAME_SEARCH.user_submittable is False
