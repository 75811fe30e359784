"""Integration tests for the brands repositories.

These tests require PostgreSQL to be running. They cover the statements a
mocked session cannot: the brain upsert, the conditional analysis claim and
brand-scoped evidence writes.
"""

from datetime import UTC, datetime, timedelta

import pytest
import pytest_asyncio

from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.value_objects import (
    AnalysisMethod,
    EvidenceStatus,
    EvidenceType,
    OnboardingStatus,
)
from brands.infrastructure.brain_repository import BrandBrainRepository
from brands.infrastructure.evidence_repository import EvidenceRepository
from brands.infrastructure.workspace_repository import BrandWorkspaceRepository
from brands.ports.exceptions import DuplicateSlugError

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def workspace_with_brain(async_session, owner):
    workspace = BrandWorkspace.create(
        owner_user_id=owner.id.value, name="Acme Co", slug="acme-co"
    )
    brain = BrandBrain.create_empty(
        brand_workspace_id=workspace.id, brand_slug=workspace.slug
    )
    workspace.link_brain(brain.id)
    async with async_session.begin():
        await BrandWorkspaceRepository(session=async_session).save(workspace)
        await BrandBrainRepository(session=async_session).upsert(brain)
    return workspace, brain


class TestWorkspaceRepository:
    @pytest.mark.asyncio
    async def test_duplicate_slug(self, session_factory, owner, workspace_with_brain):
        duplicate = BrandWorkspace.create(
            owner_user_id=owner.id.value, name="Acme Co", slug="acme-co"
        )

        async with session_factory() as session:
            with pytest.raises(DuplicateSlugError):
                async with session.begin():
                    await BrandWorkspaceRepository(session=session).save(duplicate)

    @pytest.mark.asyncio
    async def test_list_by_owner(self, async_session, owner, workspace_with_brain):
        async with async_session.begin():
            listed = await BrandWorkspaceRepository(session=async_session).list_by_owner(
                owner.id.value
            )

        assert [w.slug for w in listed] == ["acme-co"]


class TestBrainUpsert:
    @pytest.mark.asyncio
    async def test_second_create_converges_on_one_row(
        self, async_session, workspace_with_brain
    ):
        workspace, brain = workspace_with_brain
        rival = BrandBrain.create_empty(
            brand_workspace_id=workspace.id, brand_slug=workspace.slug
        )
        repository = BrandBrainRepository(session=async_session)

        async with async_session.begin():
            stored = await repository.upsert(rival)

        assert stored.id == brain.id


class TestAnalysisClaim:
    """The claim is a single conditional UPDATE shared by concurrent callers."""

    @pytest.mark.asyncio
    async def test_only_one_fresh_claim_succeeds(
        self, session_factory, workspace_with_brain
    ):
        workspace, _ = workspace_with_brain
        now = datetime.now(UTC)
        stale_before = now - timedelta(minutes=5)

        async with session_factory() as first, session_factory() as second:
            async with first.begin():
                claimed = await BrandBrainRepository(session=first).claim_for_analysis(
                    workspace.id, AnalysisMethod.LLM_EVIDENCE, now, stale_before
                )
            async with second.begin():
                rejected = await BrandBrainRepository(session=second).claim_for_analysis(
                    workspace.id, AnalysisMethod.LLM_EVIDENCE, now, stale_before
                )

        assert claimed is not None
        assert claimed.status == OnboardingStatus.IN_PROGRESS
        assert claimed.onboarding_step == 4
        assert rejected is None

    @pytest.mark.asyncio
    async def test_stale_claim_can_be_taken_over(
        self, session_factory, workspace_with_brain
    ):
        workspace, _ = workspace_with_brain
        long_ago = datetime.now(UTC) - timedelta(minutes=30)
        now = datetime.now(UTC)

        async with session_factory() as session:
            async with session.begin():
                repository = BrandBrainRepository(session=session)
                await repository.claim_for_analysis(
                    workspace.id,
                    AnalysisMethod.LLM_EVIDENCE,
                    long_ago,
                    long_ago - timedelta(minutes=5),
                )
                retaken = await repository.claim_for_analysis(
                    workspace.id,
                    AnalysisMethod.LLM_BRAND_NAME,
                    now,
                    now - timedelta(minutes=5),
                )

        assert retaken is not None
        assert retaken.analysis_method == AnalysisMethod.LLM_BRAND_NAME


class TestEvidenceRepository:
    @pytest.mark.asyncio
    async def test_list_filters_and_status_updates(
        self, async_session, workspace_with_brain
    ):
        workspace, _ = workspace_with_brain
        repository = EvidenceRepository(session=async_session)
        pending = Evidence.submit(
            brand_workspace_id=workspace.id,
            brand_slug=workspace.slug,
            type=EvidenceType.WEBSITE,
            value="https://acme.example",
        )
        done = Evidence.submit(
            brand_workspace_id=workspace.id,
            brand_slug=workspace.slug,
            type=EvidenceType.MANUAL,
            value="We sell eco-friendly packaging",
            status=EvidenceStatus.COMPLETE,
        )
        async with async_session.begin():
            await repository.save(pending)
            await repository.save(done)

        async with async_session.begin():
            complete = await repository.list_for_brand(
                workspace.id, status=EvidenceStatus.COMPLETE
            )
            updated = await repository.mark_status(
                [pending.id], "other-brand", EvidenceStatus.COMPLETE
            )

        assert [e.id for e in complete] == [done.id]
        assert updated == 0

    @pytest.mark.asyncio
    async def test_outcome_of_deleted_item_is_not_written(
        self, async_session, workspace_with_brain
    ):
        workspace, _ = workspace_with_brain
        repository = EvidenceRepository(session=async_session)
        item = Evidence.submit(
            brand_workspace_id=workspace.id,
            brand_slug=workspace.slug,
            type=EvidenceType.MANUAL,
            value="We sell eco-friendly packaging",
        )
        async with async_session.begin():
            await repository.save(item)
        async with async_session.begin():
            await repository.delete(item.id, workspace.slug)

        item.complete("Summarized notes")
        async with async_session.begin():
            stored = await repository.update_outcome(item)
            back = await repository.get(item.id, workspace.slug)

        assert stored is False
        assert back is None
