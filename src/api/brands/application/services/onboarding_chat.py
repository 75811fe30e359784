"""Onboarding chat application service."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from brands.application.chat_prompts import (
    STREAM_ERROR_SUFFIX,
    build_system_prompt,
    fallback_reply,
)
from brands.application.observability import (
    DefaultOnboardingChatProbe,
    OnboardingChatProbe,
)
from brands.application.services.workspace_registry import WorkspaceRegistry
from brands.domain.aggregates import BrandWorkspace
from brands.domain.value_objects import EvidenceStatus, NamedStep
from brands.ports.exceptions import AnalyzerError
from brands.ports.repositories import IBrandBrainRepository, IEvidenceRepository
from brands.ports.services import ChatMessage, IChatModel
from shared_kernel.exceptions import ValidationError

RECENT_EVIDENCE_LIMIT = 10


class OnboardingChatService:
    """Streams guidance for the current onboarding step."""

    def __init__(
        self,
        evidence_repository: IEvidenceRepository,
        brain_repository: IBrandBrainRepository,
        workspace_registry: WorkspaceRegistry,
        chat_model: IChatModel,
        session: AsyncSession,
        probe: OnboardingChatProbe | None = None,
    ):
        self._evidence_repository = evidence_repository
        self._brain_repository = brain_repository
        self._workspace_registry = workspace_registry
        self._chat_model = chat_model
        self._session = session
        self._probe = probe or DefaultOnboardingChatProbe()

    async def reply(
        self,
        workspace: BrandWorkspace,
        message: str,
        step: str,
        context: Any = None,
    ) -> AsyncIterator[str]:
        """Start a reply and return its text chunks.

        The first chunk is fetched before returning. If the model cannot be
        reached, the iterator yields the step's fallback reply instead. If
        the stream breaks later, an error note is appended.

        Raises:
            ValidationError: If ``step`` is not a known step name
        """
        try:
            named_step = NamedStep(step)
        except ValueError as e:
            raise ValidationError(f"Invalid step: {step}") from e

        async with self._session.begin():
            evidence = await self._evidence_repository.list_for_brand(
                workspace.id,
                status=EvidenceStatus.COMPLETE,
                limit=RECENT_EVIDENCE_LIMIT,
            )
            brain = await self._brain_repository.get_by_workspace(workspace.id)
            await self._workspace_registry.record_activity(workspace)

        messages = [
            ChatMessage(
                role="system",
                content=build_system_prompt(
                    workspace, named_step, brain, evidence, message, context
                ),
            ),
            ChatMessage(role="user", content=message),
        ]
        self._probe.chat_started(
            brand_slug=workspace.slug,
            step=named_step.value,
            evidence_used=len(evidence),
        )

        stream = self._chat_model.stream_reply(messages)
        try:
            first = await anext(stream)
        except StopAsyncIteration:
            first = ""
        except AnalyzerError as e:
            self._probe.chat_fallback_used(brand_slug=workspace.slug, error=str(e))
            return _single(fallback_reply(named_step, len(evidence)))

        return self._continue(workspace.slug, first, stream)

    async def _continue(
        self, brand_slug: str, first: str, stream: AsyncIterator[str]
    ) -> AsyncIterator[str]:
        if first:
            yield first
        try:
            async for chunk in stream:
                yield chunk
        except AnalyzerError as e:
            self._probe.chat_stream_interrupted(brand_slug=brand_slug, error=str(e))
            yield STREAM_ERROR_SUFFIX


async def _single(text: str) -> AsyncIterator[str]:
    yield text
