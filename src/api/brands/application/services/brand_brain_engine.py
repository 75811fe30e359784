"""Brand Brain engine application service.

Owns the BrandBrain aggregate: reading and patching sections, onboarding
state changes through either step representation, the analysis run, and
activation. Every state change is persisted together with the mirrored
workspace state in one transaction.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.observability import (
    BrandBrainEngineProbe,
    DefaultBrandBrainEngineProbe,
)
from brands.application.services.workspace_registry import WorkspaceRegistry
from brands.application.value_objects import (
    ActivationResult,
    AnalysisCompleted,
    AnalysisDegraded,
    AnalysisFailed,
    AnalysisOutcome,
)
from brands.domain.aggregates import BrandBrain, BrandWorkspace, Evidence
from brands.domain.analysis import (
    BrandAnalysis,
    MalformedAnalysisError,
    build_evidence_text,
    normalize_analysis,
    placeholder_analysis,
)
from brands.domain.onboarding import (
    MAX_STEP,
    InvalidStepError,
    OnboardingState,
    OnboardingStateMachine,
)
from brands.domain.value_objects import (
    AnalysisMethod,
    BrainSection,
    EvidenceStatus,
    EvidenceType,
    NamedStep,
    OnboardingStatus,
)
from brands.ports.exceptions import (
    AnalysisInProgressError,
    AnalyzerError,
    BrainNotFoundError,
    InvalidOnboardingStepError,
    InvalidSectionError,
    NoCompleteEvidenceError,
)
from brands.ports.repositories import IBrandBrainRepository, IEvidenceRepository
from brands.ports.services import IBrandAnalyzer, IOwnerDirectory

DEFAULT_STALE_AFTER = timedelta(minutes=5)


def parse_section(raw: str) -> BrainSection:
    """Resolve a section name.

    Raises:
        InvalidSectionError: If ``raw`` is not one of the eight sections
    """
    try:
        return BrainSection(raw)
    except ValueError as e:
        raise InvalidSectionError(raw) from e


class BrandBrainEngine:
    """Application service for the Brand Brain of one workspace at a time.

    Callers pass a workspace already returned by
    :meth:`WorkspaceRegistry.get_workspace`, so ownership has been checked.
    """

    def __init__(
        self,
        brain_repository: IBrandBrainRepository,
        evidence_repository: IEvidenceRepository,
        workspace_registry: WorkspaceRegistry,
        owner_directory: IOwnerDirectory,
        analyzer: IBrandAnalyzer,
        session: AsyncSession,
        stale_after: timedelta = DEFAULT_STALE_AFTER,
        degrade_on_failure: bool = True,
        probe: BrandBrainEngineProbe | None = None,
    ):
        """Initialize BrandBrainEngine with dependencies.

        Args:
            brain_repository: Repository for brain persistence
            evidence_repository: Source of complete evidence for analysis
            workspace_registry: Mirrors brain state onto the workspace
            owner_directory: Marks the owner's onboarding completed on activation
            analyzer: Language-model analyzer
            session: Database session for transaction management
            stale_after: Age after which an in-progress analysis may be reclaimed
            degrade_on_failure: Store placeholder content when the analyzer fails
            probe: Optional domain probe for observability
        """
        self._brain_repository = brain_repository
        self._evidence_repository = evidence_repository
        self._workspace_registry = workspace_registry
        self._owner_directory = owner_directory
        self._analyzer = analyzer
        self._session = session
        self._stale_after = stale_after
        self._degrade_on_failure = degrade_on_failure
        self._probe = probe or DefaultBrandBrainEngineProbe()

    async def _load_or_create(self, workspace: BrandWorkspace) -> BrandBrain:
        """Brain of the workspace, created empty if missing. Needs a transaction."""
        brain = await self._brain_repository.get_by_workspace(workspace.id)
        if brain is not None:
            return brain
        brain = await self._brain_repository.upsert(
            BrandBrain.create_empty(
                brand_workspace_id=workspace.id, brand_slug=workspace.slug
            )
        )
        if workspace.brain_id != brain.id:
            workspace.link_brain(brain.id)
        return brain

    async def _store(self, workspace: BrandWorkspace, brain: BrandBrain) -> BrandBrain:
        """Persist the brain and mirror its state. Needs a transaction."""
        stored = await self._brain_repository.upsert(brain)
        await self._workspace_registry.record_activity(workspace, stored.state)
        return stored

    # Reading and editing

    async def get_brain(self, workspace: BrandWorkspace) -> BrandBrain | None:
        """The workspace's brain, or None if it has not been created yet."""
        async with self._session.begin():
            return await self._brain_repository.get_by_workspace(workspace.id)

    async def patch_sections(
        self,
        workspace: BrandWorkspace,
        updates: dict[BrainSection, Any],
        status: OnboardingStatus | None = None,
    ) -> BrandBrain:
        """Apply a partial update, creating the brain if it is missing.

        Args:
            workspace: Owning workspace
            updates: New content per section; list sections accept lists or
                newline-separated text
            status: Optional status override; the step is left unchanged
        """
        async with self._session.begin():
            brain = await self._load_or_create(workspace)
            brain.patch_sections(updates)
            if status is not None:
                brain.apply_state(
                    OnboardingState(
                        step=brain.onboarding_step,
                        status=status,
                        is_activated=brain.is_activated,
                    )
                )
            brain = await self._store(workspace, brain)

        self._probe.brain_updated(
            brand_slug=workspace.slug,
            sections=[section.value for section in updates],
        )
        return brain

    async def refine_section(
        self, workspace: BrandWorkspace, section: str, content: str
    ) -> BrandBrain:
        """Replace one section from free text.

        List sections are split on newlines with blank lines dropped.

        Raises:
            InvalidSectionError: If ``section`` is not a brain section
            BrainNotFoundError: If the workspace has no brain yet
        """
        parsed = parse_section(section)
        async with self._session.begin():
            brain = await self._brain_repository.get_by_workspace(workspace.id)
            if brain is None:
                raise BrainNotFoundError(workspace.slug)
            brain.refine_section(parsed, content)
            brain = await self._store(workspace, brain)

        self._probe.brain_updated(brand_slug=workspace.slug, sections=[parsed.value])
        return brain

    # Onboarding state

    async def get_state(self, workspace: BrandWorkspace) -> BrandBrain:
        """The brain carrying the onboarding state, created at step 1 if missing."""
        async with self._session.begin():
            brain = await self._brain_repository.get_by_workspace(workspace.id)
            if brain is None:
                brain = await self._load_or_create(workspace)
                await self._workspace_registry.record_activity(workspace, brain.state)
        return brain

    async def set_named_step(self, workspace: BrandWorkspace, step: str) -> BrandBrain:
        """Move to a named step. ``complete`` activates the brain.

        Raises:
            InvalidOnboardingStepError: If ``step`` is not a known step name
        """
        try:
            named = NamedStep(step)
        except ValueError as e:
            raise InvalidOnboardingStepError(f"Invalid step: {step}") from e
        return await self._transition(
            workspace,
            lambda state: OnboardingStateMachine.advance_to_name(state, named),
        )

    async def set_numeric_step(self, workspace: BrandWorkspace, step: int) -> BrandBrain:
        """Move to a numeric step. Step 5 activates the brain.

        Raises:
            InvalidOnboardingStepError: If ``step`` is outside 1..5
        """
        try:
            OnboardingStateMachine.validate_step(step)
        except InvalidStepError as e:
            raise InvalidOnboardingStepError(str(e)) from e
        return await self._transition(
            workspace,
            lambda state: OnboardingStateMachine.advance(
                state, step, activate=step == MAX_STEP
            ),
        )

    async def _transition(
        self,
        workspace: BrandWorkspace,
        compute: Callable[[OnboardingState], OnboardingState],
    ) -> BrandBrain:
        async with self._session.begin():
            brain = await self._load_or_create(workspace)
            was_activated = brain.is_activated
            brain.apply_state(compute(brain.state))
            brain = await self._store(workspace, brain)
            if brain.is_activated and not was_activated:
                await self._owner_directory.mark_onboarding_completed(
                    workspace.owner_user_id
                )

        self._probe.state_changed(
            brand_slug=workspace.slug,
            step=brain.onboarding_step,
            status=brain.status.value,
        )
        if brain.is_activated and not was_activated:
            self._probe.brain_activated(brand_slug=workspace.slug)
        return brain

    async def activate(self, workspace: BrandWorkspace) -> ActivationResult:
        """Complete onboarding: ready, step 5, activated. Idempotent.

        Also marks the owner's onboarding as completed.

        Raises:
            BrainNotFoundError: If the workspace has no brain yet
        """
        async with self._session.begin():
            brain = await self._brain_repository.get_by_workspace(workspace.id)
            if brain is None:
                raise BrainNotFoundError(workspace.slug)
            brain.activate()
            brain = await self._store(workspace, brain)
            await self._owner_directory.mark_onboarding_completed(
                workspace.owner_user_id
            )

        self._probe.brain_activated(brand_slug=workspace.slug)
        return ActivationResult(
            brain=brain,
            workspace=workspace,
            completed_at=brain.activated_at or brain.updated_at,
        )

    # Analysis

    async def analysis_status(self, workspace: BrandWorkspace) -> BrandBrain | None:
        """The brain as seen by analysis pollers, or None before creation."""
        return await self.get_brain(workspace)

    async def reset_analysis(self, workspace: BrandWorkspace) -> BrandBrain:
        """Let the user retry analysis: step 3, not_started, timestamps cleared."""
        async with self._session.begin():
            brain = await self._load_or_create(workspace)
            brain.reset_analysis()
            brain = await self._store(workspace, brain)

        self._probe.state_changed(
            brand_slug=workspace.slug,
            step=brain.onboarding_step,
            status=brain.status.value,
        )
        return brain

    async def run_analysis(
        self,
        workspace: BrandWorkspace,
        force: bool = False,
        brand_name_only: bool = False,
    ) -> AnalysisOutcome:
        """Synthesize the Brand Brain from complete evidence or the brand name.

        The brain is claimed with a single conditional update, so at most one
        run holds it at a time. A claim older than the stale window can be
        taken over, and ``force`` resets the brain before claiming.

        Args:
            workspace: Owning workspace
            force: Reset any current analysis state first
            brand_name_only: Analyze from the brand name alone and record a
                ``brand_name_search`` evidence item

        Returns:
            AnalysisCompleted, AnalysisDegraded or AnalysisFailed

        Raises:
            AnalysisInProgressError: If another run holds the brain
            NoCompleteEvidenceError: If evidence-based analysis finds no
                complete evidence; the claim is released to step 3
        """
        method = (
            AnalysisMethod.LLM_BRAND_NAME if brand_name_only else AnalysisMethod.LLM_EVIDENCE
        )
        brain = await self._claim(workspace, method, force)

        search_item: Evidence | None = None
        if brand_name_only:
            search_item = await self._record_brand_name_search(workspace)
            evidence_text = ""
            evidence_count = 1
        else:
            async with self._session.begin():
                evidence = await self._evidence_repository.list_for_brand(
                    workspace.id, status=EvidenceStatus.COMPLETE, limit=None
                )
            evidence_text = build_evidence_text(evidence)
            evidence_count = sum(1 for item in evidence if item.is_complete)
            if not evidence_text:
                await self._release(workspace)
                self._probe.analysis_rejected(
                    brand_slug=workspace.slug, reason="no_evidence"
                )
                raise NoCompleteEvidenceError()

        self._probe.analysis_started(
            brand_slug=workspace.slug,
            method=method.value,
            evidence_count=evidence_count,
        )

        try:
            return await self._analyze_and_store(
                workspace, brain, method, evidence_text, evidence_count, search_item
            )
        except Exception as e:
            return await self._fail(
                workspace, brain, f"{type(e).__name__}: {e}", search_item=search_item
            )

    async def _claim(
        self, workspace: BrandWorkspace, method: AnalysisMethod, force: bool
    ) -> BrandBrain:
        now = datetime.now(UTC)
        async with self._session.begin():
            brain = await self._load_or_create(workspace)
            if force:
                brain.reset_analysis()
                await self._brain_repository.upsert(brain)
            claimed = await self._brain_repository.claim_for_analysis(
                workspace.id,
                method=method,
                started_at=now,
                stale_before=now - self._stale_after,
            )
            if claimed is None:
                self._probe.analysis_rejected(
                    brand_slug=workspace.slug, reason="in_progress"
                )
                raise AnalysisInProgressError(brain.analysis_started_at)
            await self._workspace_registry.record_activity(workspace, claimed.state)
        return claimed

    async def _release(self, workspace: BrandWorkspace) -> None:
        async with self._session.begin():
            brain = await self._load_or_create(workspace)
            brain.reset_analysis()
            await self._store(workspace, brain)

    async def _record_brand_name_search(self, workspace: BrandWorkspace) -> Evidence:
        item = Evidence.submit(
            brand_workspace_id=workspace.id,
            brand_slug=workspace.slug,
            type=EvidenceType.BRAND_NAME_SEARCH,
            value=workspace.name,
            status=EvidenceStatus.PROCESSING,
            metadata={"source": "analysis"},
        )
        async with self._session.begin():
            await self._evidence_repository.save(item)
        return item

    async def _analyze_and_store(
        self,
        workspace: BrandWorkspace,
        brain: BrandBrain,
        method: AnalysisMethod,
        evidence_text: str,
        evidence_count: int,
        search_item: Evidence | None,
    ) -> AnalysisOutcome:
        failure: str | None = None
        analysis: BrandAnalysis | None = None
        try:
            raw = await self._analyzer.analyze_brand(workspace.name, evidence_text)
            analysis = normalize_analysis(raw)
        except (AnalyzerError, MalformedAnalysisError) as e:
            failure = str(e) or type(e).__name__

        if analysis is None and not self._degrade_on_failure:
            return await self._fail(
                workspace, brain, failure or "analysis failed", search_item=search_item
            )

        if analysis is None:
            analysis = placeholder_analysis(workspace.name, evidence_text)
            method = AnalysisMethod.PLACEHOLDER

        async with self._session.begin():
            brain.apply_analysis(
                analysis,
                method=method,
                completed_at=datetime.now(UTC),
                evidence_count=evidence_count,
                error=failure,
            )
            brain = await self._store(workspace, brain)
            if search_item is not None:
                if failure is None:
                    search_item.complete(
                        analysis.summary, summary="Brand-name analysis completed"
                    )
                else:
                    search_item.fail(failure)
                await self._evidence_repository.update_outcome(search_item)

        if failure is not None:
            self._probe.analysis_degraded(brand_slug=workspace.slug, reason=failure)
            return AnalysisDegraded(brain=brain, reason=failure)

        self._probe.analysis_completed(
            brand_slug=workspace.slug, duration_ms=brain.analysis_duration_ms
        )
        return AnalysisCompleted(brain=brain)

    async def _fail(
        self,
        workspace: BrandWorkspace,
        claimed: BrandBrain,
        reason: str,
        search_item: Evidence | None = None,
    ) -> AnalysisFailed:
        """Send the brain back to evidence collection with the error recorded.

        A brand-name search item recorded for the run is marked ``failed``
        in the same transaction.
        """
        async with self._session.begin():
            brain = (
                await self._brain_repository.get_by_workspace(workspace.id) or claimed
            )
            brain.record_analysis_failure(reason, failed_at=datetime.now(UTC))
            brain = await self._store(workspace, brain)
            if search_item is not None:
                search_item.fail(reason)
                await self._evidence_repository.update_outcome(search_item)

        self._probe.analysis_failed(brand_slug=workspace.slug, error=reason)
        return AnalysisFailed(brain=brain, reason=reason)
