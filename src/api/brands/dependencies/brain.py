"""FastAPI dependencies for the Brand Brain engine, evidence and chat."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.observability import (
    DefaultBrandBrainEngineProbe,
    DefaultEvidenceLedgerProbe,
    DefaultOnboardingChatProbe,
)
from brands.application.services import (
    BrandBrainEngine,
    EvidenceLedger,
    OnboardingChatService,
    WorkspaceRegistry,
)
from brands.dependencies.workspace import (
    get_brain_repository,
    get_evidence_repository,
    get_workspace_cache,
    get_workspace_registry,
)
from brands.domain.value_objects import EvidenceId
from brands.infrastructure.brain_repository import BrandBrainRepository
from brands.infrastructure.evidence_repository import EvidenceRepository
from brands.infrastructure.language_model import OpenAICompatibleClient
from brands.infrastructure.owner_directory import IamOwnerDirectory
from brands.infrastructure.workspace_repository import BrandWorkspaceRepository
from brands.ports.services import IBrandAnalyzer, IChatModel, IOwnerDirectory
from iam.application.services import UserService
from iam.dependencies.user import get_user_service
from infrastructure.database.dependencies import get_session_factory, get_write_session
from infrastructure.settings import get_analyzer_settings

EvidenceProcessor = Callable[[EvidenceId, str], Awaitable[None]]

_language_model: OpenAICompatibleClient | None = None


def get_language_model() -> OpenAICompatibleClient:
    """Get the shared model client (singleton), created on first use."""
    global _language_model
    if _language_model is None:
        settings = get_analyzer_settings()
        _language_model = OpenAICompatibleClient(
            api_key=settings.api_key.get_secret_value() if settings.api_key else None,
            base_url=settings.base_url,
            model=settings.model,
            timeout_seconds=settings.timeout_seconds,
        )
    return _language_model


async def close_language_model() -> None:
    """Close the shared model client on application shutdown."""
    global _language_model
    if _language_model is not None:
        await _language_model.close()
        _language_model = None


def get_analyzer() -> IBrandAnalyzer:
    """Get the brand analyzer."""
    return get_language_model()


def get_chat_model() -> IChatModel:
    """Get the onboarding chat model."""
    return get_language_model()


def get_owner_directory(
    user_service: Annotated[UserService, Depends(get_user_service)],
) -> IOwnerDirectory:
    """Get the owner directory backed by the IAM user service."""
    return IamOwnerDirectory(user_service=user_service)


def get_brand_brain_engine(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    brain_repository: Annotated[BrandBrainRepository, Depends(get_brain_repository)],
    evidence_repository: Annotated[EvidenceRepository, Depends(get_evidence_repository)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
    owner_directory: Annotated[IOwnerDirectory, Depends(get_owner_directory)],
    analyzer: Annotated[IBrandAnalyzer, Depends(get_analyzer)],
) -> BrandBrainEngine:
    """Get BrandBrainEngine instance configured from analyzer settings."""
    settings = get_analyzer_settings()
    return BrandBrainEngine(
        brain_repository=brain_repository,
        evidence_repository=evidence_repository,
        workspace_registry=registry,
        owner_directory=owner_directory,
        analyzer=analyzer,
        session=session,
        stale_after=timedelta(minutes=settings.stale_analysis_minutes),
        degrade_on_failure=settings.degrade_on_failure,
        probe=DefaultBrandBrainEngineProbe(),
    )


def get_evidence_ledger(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    evidence_repository: Annotated[EvidenceRepository, Depends(get_evidence_repository)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
    analyzer: Annotated[IBrandAnalyzer, Depends(get_analyzer)],
) -> EvidenceLedger:
    """Get EvidenceLedger instance bound to the request session."""
    return EvidenceLedger(
        evidence_repository=evidence_repository,
        workspace_registry=registry,
        analyzer=analyzer,
        session=session,
        probe=DefaultEvidenceLedgerProbe(),
    )


def get_chat_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    evidence_repository: Annotated[EvidenceRepository, Depends(get_evidence_repository)],
    brain_repository: Annotated[BrandBrainRepository, Depends(get_brain_repository)],
    registry: Annotated[WorkspaceRegistry, Depends(get_workspace_registry)],
    chat_model: Annotated[IChatModel, Depends(get_chat_model)],
) -> OnboardingChatService:
    """Get OnboardingChatService instance."""
    return OnboardingChatService(
        evidence_repository=evidence_repository,
        brain_repository=brain_repository,
        workspace_registry=registry,
        chat_model=chat_model,
        session=session,
        probe=DefaultOnboardingChatProbe(),
    )


async def process_evidence_in_background(evidence_id: EvidenceId, brand_slug: str) -> None:
    """Process one evidence item on a session that outlives the request."""
    async with get_session_factory()() as session:
        evidence_repository = EvidenceRepository(session=session)
        registry = WorkspaceRegistry(
            workspace_repository=BrandWorkspaceRepository(session=session),
            brain_repository=BrandBrainRepository(session=session),
            evidence_repository=evidence_repository,
            session=session,
            cache=get_workspace_cache(),
        )
        ledger = EvidenceLedger(
            evidence_repository=evidence_repository,
            workspace_registry=registry,
            analyzer=get_analyzer(),
            session=session,
        )
        await ledger.process_evidence(evidence_id, brand_slug)


def get_evidence_processor() -> EvidenceProcessor:
    """Background task that moves new evidence to ``complete``."""
    return process_evidence_in_background
