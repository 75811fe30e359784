"""Onboarding routes for one brand.

Every route resolves the workspace through ``get_owned_workspace``, so a
brand owned by someone else answers 404 exactly like a missing one.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from fastapi.responses import StreamingResponse

from brands.application.services import (
    BrandBrainEngine,
    EvidenceLedger,
    OnboardingChatService,
)
from brands.application.value_objects import AnalysisFailed
from brands.dependencies.brain import (
    EvidenceProcessor,
    get_brand_brain_engine,
    get_chat_service,
    get_evidence_ledger,
    get_evidence_processor,
)
from brands.dependencies.workspace import get_owned_workspace
from brands.domain.aggregates import BrandWorkspace
from brands.domain.value_objects import EvidenceStatus, EvidenceType
from brands.ports.exceptions import (
    AnalysisFailedError,
    AnalysisInProgressError,
    BrainNotFoundError,
    EvidenceNotFoundError,
    InvalidOnboardingStepError,
    InvalidSectionError,
    NoCompleteEvidenceError,
)
from brands.presentation.onboarding.models import (
    ActivationResponse,
    AddEvidenceRequest,
    AnalysisStatusResponse,
    AnalyzeRequest,
    AnalyzeResponse,
    BrainResponse,
    ChatRequest,
    EvidenceDeletedResponse,
    EvidenceListResponse,
    EvidenceResponse,
    NamedStateRequest,
    NamedStateResponse,
    NumericStateRequest,
    NumericStateResponse,
    PatchBrainRequest,
    RefineSectionRequest,
    UpdateEvidenceRequest,
)
from brands.presentation.workspaces.models import WorkspaceResponse
from shared_kernel.envelope import SuccessEnvelope
from shared_kernel.exceptions import ValidationError
from shared_kernel.middleware import http_error

router = APIRouter(
    prefix="/brands/{slug}/onboarding",
    tags=["onboarding"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "Brand not found or not owned"},
    },
)

OwnedWorkspace = Annotated[BrandWorkspace, Depends(get_owned_workspace)]
Engine = Annotated[BrandBrainEngine, Depends(get_brand_brain_engine)]
Ledger = Annotated[EvidenceLedger, Depends(get_evidence_ledger)]

CHAT_MEDIA_TYPE = "text/plain; charset=utf-8"


# Numeric-step state


@router.get(
    "",
    response_model=SuccessEnvelope[NumericStateResponse],
    summary="Get onboarding progress (numeric step)",
)
async def get_progress(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[NumericStateResponse]:
    brain = await engine.get_state(workspace)
    return SuccessEnvelope(data=NumericStateResponse.from_domain(brain))


@router.patch(
    "",
    response_model=SuccessEnvelope[NumericStateResponse],
    summary="Set onboarding progress (numeric step)",
    responses={400: {"description": "Step outside 1-5"}},
)
async def set_progress(
    request: NumericStateRequest, workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[NumericStateResponse]:
    """Move to step 1-5. Step 5 activates the brain."""
    try:
        brain = await engine.set_numeric_step(workspace, request.step)
    except InvalidOnboardingStepError as e:
        raise http_error(e) from e
    return SuccessEnvelope(data=NumericStateResponse.from_domain(brain))


# Named-step state


@router.get(
    "/state",
    response_model=SuccessEnvelope[NamedStateResponse],
    summary="Get onboarding state (named step)",
)
async def get_state(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[NamedStateResponse]:
    """Current state; the brain is created at step 1 when missing."""
    brain = await engine.get_state(workspace)
    return SuccessEnvelope(data=NamedStateResponse.from_domain(brain))


@router.patch(
    "/state",
    response_model=SuccessEnvelope[NamedStateResponse],
    summary="Set onboarding state (named step)",
    responses={400: {"description": "Unknown step name"}},
)
async def set_state(
    request: NamedStateRequest, workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[NamedStateResponse]:
    try:
        brain = await engine.set_named_step(workspace, request.step)
    except InvalidOnboardingStepError as e:
        raise http_error(e) from e
    return SuccessEnvelope(data=NamedStateResponse.from_domain(brain))


# Brain


@router.get(
    "/brain",
    response_model=SuccessEnvelope[BrainResponse | None],
    summary="Get the Brand Brain",
)
async def get_brain(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[BrainResponse | None]:
    """The brain, or ``data: null`` before it exists."""
    brain = await engine.get_brain(workspace)
    return SuccessEnvelope(data=BrainResponse.from_domain(brain) if brain else None)


@router.patch(
    "/brain",
    response_model=SuccessEnvelope[BrainResponse],
    summary="Update Brand Brain sections",
)
async def patch_brain(
    request: PatchBrainRequest, workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[BrainResponse]:
    brain = await engine.patch_sections(
        workspace, request.section_updates(), status=request.status
    )
    return SuccessEnvelope(data=BrainResponse.from_domain(brain))


@router.post(
    "/brain",
    response_model=SuccessEnvelope[ActivationResponse],
    summary="Complete onboarding",
    description="Activates the Brand Brain and marks the owner's onboarding completed.",
)
async def activate_brain(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[ActivationResponse]:
    try:
        result = await engine.activate(workspace)
    except BrainNotFoundError as e:
        raise http_error(e) from e
    return SuccessEnvelope(
        data=ActivationResponse(
            brain=BrainResponse.from_domain(result.brain),
            workspace=WorkspaceResponse.from_domain(result.workspace),
            completed_at=result.completed_at,
        )
    )


@router.put(
    "/brain",
    response_model=SuccessEnvelope[BrainResponse],
    summary="Refine one Brand Brain section",
    responses={400: {"description": "Unknown section"}},
)
async def refine_brain_section(
    request: RefineSectionRequest, workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[BrainResponse]:
    try:
        brain = await engine.refine_section(workspace, request.section, request.content)
    except (InvalidSectionError, BrainNotFoundError) as e:
        raise http_error(e) from e
    return SuccessEnvelope(data=BrainResponse.from_domain(brain))


# Analysis


@router.post(
    "/analyze",
    response_model=SuccessEnvelope[AnalyzeResponse],
    summary="Analyze the brand",
    responses={
        400: {"description": "No complete evidence"},
        409: {"description": "Analysis already in progress"},
        500: {"description": "Analysis failed"},
    },
)
async def analyze(
    workspace: OwnedWorkspace,
    engine: Engine,
    request: AnalyzeRequest | None = None,
) -> SuccessEnvelope[AnalyzeResponse]:
    """Build the Brand Brain from complete evidence or the brand name.

    A degraded run still answers 200 with ``outcome: degraded``.
    """
    options = request or AnalyzeRequest()
    try:
        outcome = await engine.run_analysis(
            workspace,
            force=options.force,
            brand_name_only=options.brand_name_only,
        )
    except (AnalysisInProgressError, NoCompleteEvidenceError) as e:
        raise http_error(e) from e

    if isinstance(outcome, AnalysisFailed):
        # Rendered by the global handler with the generic 500 message.
        raise AnalysisFailedError(outcome.reason)
    return SuccessEnvelope(data=AnalyzeResponse.from_outcome(outcome))


@router.get(
    "/analyze",
    response_model=SuccessEnvelope[AnalysisStatusResponse],
    summary="Poll analysis status",
)
async def analysis_status(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[AnalysisStatusResponse]:
    brain = await engine.analysis_status(workspace)
    return SuccessEnvelope(data=AnalysisStatusResponse.from_domain(brain))


@router.post(
    "/analyze/reset",
    response_model=SuccessEnvelope[AnalysisStatusResponse],
    summary="Reset analysis",
    description="Back to step 3 so analysis can be retried.",
)
async def reset_analysis(
    workspace: OwnedWorkspace, engine: Engine
) -> SuccessEnvelope[AnalysisStatusResponse]:
    brain = await engine.reset_analysis(workspace)
    return SuccessEnvelope(data=AnalysisStatusResponse.from_domain(brain))


# Evidence


@router.get(
    "/evidence",
    response_model=SuccessEnvelope[EvidenceListResponse],
    summary="List evidence",
)
async def list_evidence(
    workspace: OwnedWorkspace,
    ledger: Ledger,
    status_filter: Annotated[EvidenceStatus | None, Query(alias="status")] = None,
    type_filter: Annotated[EvidenceType | None, Query(alias="type")] = None,
    limit: Annotated[int, Query(description="Clamped to 1-100")] = 50,
) -> SuccessEnvelope[EvidenceListResponse]:
    """Evidence of the brand, newest first."""
    items = await ledger.list_evidence(
        workspace, status=status_filter, type=type_filter, limit=limit
    )
    return SuccessEnvelope(
        data=EvidenceListResponse(
            items=[EvidenceResponse.from_domain(item) for item in items],
            count=len(items),
        )
    )


@router.post(
    "/evidence",
    response_model=SuccessEnvelope[EvidenceResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Add evidence",
    description="Stores the item as pending and processes it in the background.",
)
async def add_evidence(
    request: AddEvidenceRequest,
    background_tasks: BackgroundTasks,
    workspace: OwnedWorkspace,
    ledger: Ledger,
    process_evidence: Annotated[EvidenceProcessor, Depends(get_evidence_processor)],
) -> SuccessEnvelope[EvidenceResponse]:
    try:
        evidence = await ledger.add_evidence(
            workspace, request.type, request.value, metadata=request.metadata
        )
    except ValidationError as e:
        raise http_error(e) from e

    background_tasks.add_task(process_evidence, evidence.id, workspace.slug)
    return SuccessEnvelope(data=EvidenceResponse.from_domain(evidence))


@router.patch(
    "/evidence",
    response_model=SuccessEnvelope[EvidenceResponse],
    summary="Update evidence",
)
async def update_evidence(
    request: UpdateEvidenceRequest, workspace: OwnedWorkspace, ledger: Ledger
) -> SuccessEnvelope[EvidenceResponse]:
    try:
        evidence = await ledger.update_evidence(
            workspace,
            request.id,
            status=request.status,
            analyzed_content=request.analyzed_content,
            analysis_summary=request.analysis_summary,
        )
    except EvidenceNotFoundError as e:
        raise http_error(e) from e
    return SuccessEnvelope(data=EvidenceResponse.from_domain(evidence))


@router.delete(
    "/evidence",
    response_model=SuccessEnvelope[EvidenceDeletedResponse],
    summary="Remove evidence",
)
async def remove_evidence(
    workspace: OwnedWorkspace,
    ledger: Ledger,
    evidence_id: Annotated[str, Query(alias="id")],
) -> SuccessEnvelope[EvidenceDeletedResponse]:
    try:
        await ledger.remove_evidence(workspace, evidence_id)
    except EvidenceNotFoundError as e:
        raise http_error(e) from e
    return SuccessEnvelope(data=EvidenceDeletedResponse(id=evidence_id))


# Chat


@router.post(
    "/chat",
    response_class=StreamingResponse,
    summary="Onboarding chat",
    responses={200: {"content": {CHAT_MEDIA_TYPE: {}}}},
)
async def chat(
    request: ChatRequest,
    workspace: OwnedWorkspace,
    chat_service: Annotated[OnboardingChatService, Depends(get_chat_service)],
) -> StreamingResponse:
    """Stream guidance for the current step as plain text."""
    try:
        chunks = await chat_service.reply(
            workspace, request.message, request.step, context=request.context
        )
    except ValidationError as e:
        raise http_error(e) from e
    return StreamingResponse(chunks, media_type=CHAT_MEDIA_TYPE)
