"""Unit tests for OnboardingChatService and its prompts."""

from unittest.mock import AsyncMock, create_autospec

import pytest

from brands.application.chat_prompts import (
    FALLBACK_INTRO,
    STREAM_ERROR_SUFFIX,
    build_system_prompt,
    evidence_context,
    fallback_reply,
)
from brands.application.observability import OnboardingChatProbe
from brands.application.services import OnboardingChatService, WorkspaceRegistry
from brands.domain.value_objects import BrainSection, EvidenceStatus, NamedStep
from brands.ports.exceptions import AnalyzerError
from brands.ports.repositories import IBrandBrainRepository, IEvidenceRepository
from shared_kernel.exceptions import ValidationError


class FakeChatModel:
    """Chat model yielding fixed chunks, optionally failing at one position."""

    def __init__(self, chunks=(), fail_at=None):
        self.chunks = list(chunks)
        self.fail_at = fail_at
        self.messages = None

    def stream_reply(self, messages):
        self.messages = messages
        return self._stream()

    async def _stream(self):
        for position, chunk in enumerate(self.chunks):
            if position == self.fail_at:
                raise AnalyzerError("connection reset")
            yield chunk
        if self.fail_at is not None and self.fail_at >= len(self.chunks):
            raise AnalyzerError("connection reset")


async def collect(chunks):
    return "".join([chunk async for chunk in chunks])


@pytest.fixture
def mock_evidence_repository(make_evidence):
    repository = create_autospec(IEvidenceRepository, instance=True)
    repository.list_for_brand = AsyncMock(return_value=[make_evidence()])
    return repository


@pytest.fixture
def mock_brain_repository(brain):
    repository = create_autospec(IBrandBrainRepository, instance=True)
    repository.get_by_workspace = AsyncMock(return_value=brain)
    return repository


@pytest.fixture
def mock_registry():
    return create_autospec(WorkspaceRegistry, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(OnboardingChatProbe, instance=True)


@pytest.fixture
def make_service(
    mock_evidence_repository, mock_brain_repository, mock_registry, mock_session, mock_probe
):
    def _make(chat_model):
        return OnboardingChatService(
            evidence_repository=mock_evidence_repository,
            brain_repository=mock_brain_repository,
            workspace_registry=mock_registry,
            chat_model=chat_model,
            session=mock_session,
            probe=mock_probe,
        )

    return _make


class TestReply:
    """Tests for OnboardingChatService.reply."""

    @pytest.mark.asyncio
    async def test_streams_model_chunks(
        self, make_service, workspace, mock_registry, mock_probe
    ):
        model = FakeChatModel(["Welcome ", "to ", "Acme!"])

        chunks = await make_service(model).reply(workspace, "Hi", "intro")

        assert await collect(chunks) == "Welcome to Acme!"
        mock_registry.record_activity.assert_awaited_once_with(workspace)
        mock_probe.chat_started.assert_called_once_with(
            brand_slug="acme-co", step="intro", evidence_used=1
        )

    @pytest.mark.asyncio
    async def test_prompt_carries_step_and_message(self, make_service, workspace):
        model = FakeChatModel(["ok"])

        chunks = await make_service(model).reply(
            workspace, "Here is our site", "collecting_evidence", {"page": "onboarding"}
        )
        await collect(chunks)

        system, user = model.messages
        assert system.role == "system"
        assert "CURRENT ONBOARDING STEP: collecting_evidence" in system.content
        assert "BRAND NAME: Acme Co" in system.content
        assert '"page": "onboarding"' in system.content
        assert user.role == "user"
        assert user.content == "Here is our site"

    @pytest.mark.asyncio
    async def test_only_complete_evidence_is_used(
        self, make_service, workspace, mock_evidence_repository
    ):
        await make_service(FakeChatModel(["ok"])).reply(workspace, "Hi", "intro")

        kwargs = mock_evidence_repository.list_for_brand.call_args.kwargs
        assert kwargs["status"] is EvidenceStatus.COMPLETE
        assert kwargs["limit"] == 10

    @pytest.mark.asyncio
    async def test_unknown_step_is_rejected(self, make_service, workspace, mock_session):
        with pytest.raises(ValidationError) as exc_info:
            await make_service(FakeChatModel()).reply(workspace, "Hi", "dancing")

        assert exc_info.value.message == "Invalid step: dancing"
        mock_session.begin.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreachable_model_serves_fallback(
        self, make_service, workspace, mock_probe
    ):
        model = FakeChatModel(["never"], fail_at=0)

        chunks = await make_service(model).reply(workspace, "Hi", "collecting_evidence")

        text = await collect(chunks)
        assert text.startswith(FALLBACK_INTRO)
        assert "1 evidence item." in text
        mock_probe.chat_fallback_used.assert_called_once_with(
            brand_slug="acme-co", error="connection reset"
        )

    @pytest.mark.asyncio
    async def test_broken_stream_appends_error_note(
        self, make_service, workspace, mock_probe
    ):
        model = FakeChatModel(["Partial ", "answer"], fail_at=1)

        chunks = await make_service(model).reply(workspace, "Hi", "intro")

        assert await collect(chunks) == "Partial " + STREAM_ERROR_SUFFIX
        mock_probe.chat_stream_interrupted.assert_called_once()

    @pytest.mark.asyncio
    async def test_empty_stream_yields_nothing(self, make_service, workspace):
        chunks = await make_service(FakeChatModel([])).reply(workspace, "Hi", "intro")

        assert await collect(chunks) == ""


class TestPrompts:
    """Prompt and fallback text."""

    @pytest.mark.parametrize("step", list(NamedStep))
    def test_every_step_has_a_fallback(self, step):
        reply = fallback_reply(step, 0)

        assert reply.startswith(FALLBACK_INTRO)
        assert len(reply) > len(FALLBACK_INTRO)

    def test_fallback_pluralizes_evidence_count(self):
        assert "2 evidence items" in fallback_reply(NamedStep.COLLECTING_EVIDENCE, 2)
        assert "1 evidence item." in fallback_reply(NamedStep.COLLECTING_EVIDENCE, 1)

    def test_evidence_context_lists_at_most_five(self, make_evidence):
        items = [make_evidence(f"item {n}") for n in range(7)]

        context = evidence_context(items)

        assert context.startswith("Collected Evidence (7 items):")
        assert "5. [manual] item 4" in context
        assert "item 5" not in context

    def test_evidence_context_empty(self):
        assert evidence_context([]) == ""

    def test_system_prompt_reflects_brain_content(self, workspace, brain):
        empty = build_system_prompt(workspace, NamedStep.ANALYZING, brain, [], "hi")
        brain.refine_section(BrainSection.TONE, "Bold")
        filled = build_system_prompt(workspace, NamedStep.ANALYZING, brain, [], "hi")

        assert "Not yet - needs analysis" in empty
        assert "Yes - ready for review" in filled
        assert "move on to reviewing it" in filled

    def test_system_prompt_without_brain(self, workspace):
        prompt = build_system_prompt(workspace, NamedStep.INTRO, None, [], "hi")

        assert "BRAND BRAIN STATUS: not_started" in prompt
        assert "[ACTION:Add a website:add-evidence:secondary]" in prompt
