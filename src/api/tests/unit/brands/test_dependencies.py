"""Unit tests for Brands FastAPI dependencies."""

from unittest.mock import AsyncMock, MagicMock, create_autospec, patch

import pytest
from fastapi import HTTPException

from brands.application.services import WorkspaceRegistry
from brands.dependencies import brain as brain_dependencies
from brands.dependencies.brain import (
    close_language_model,
    get_analyzer,
    get_chat_model,
    get_evidence_processor,
    get_language_model,
    process_evidence_in_background,
)
from brands.dependencies.workspace import get_owned_workspace, get_workspace_cache
from brands.infrastructure.workspace_cache import InMemoryWorkspaceCache
from brands.ports.exceptions import WorkspaceNotFoundError
from infrastructure.settings import AnalyzerSettings
from shared_kernel.auth import CurrentUser

OWNER_ID = "01JAAAAAAAAAAAAAAAAAAAAAAA"


@pytest.fixture
def mock_registry():
    return create_autospec(WorkspaceRegistry, instance=True)


@pytest.fixture
def reset_language_model():
    brain_dependencies._language_model = None
    yield
    brain_dependencies._language_model = None


class TestGetOwnedWorkspace:
    """Tests for the ownership check used by every onboarding route."""

    @pytest.mark.asyncio
    async def test_returns_owned_workspace(self, mock_registry, workspace):
        mock_registry.get_workspace = AsyncMock(return_value=workspace)
        user = CurrentUser(user_id=OWNER_ID, email="owner@acme.example")

        result = await get_owned_workspace("acme-co", user, mock_registry)

        assert result is workspace
        mock_registry.get_workspace.assert_awaited_once_with("acme-co", OWNER_ID)

    @pytest.mark.asyncio
    async def test_foreign_workspace_is_404(self, mock_registry):
        mock_registry.get_workspace = AsyncMock(
            side_effect=WorkspaceNotFoundError("acme-co")
        )
        user = CurrentUser(user_id="01JCCCCCCCCCCCCCCCCCCCCCCC", email="x@example.com")

        with pytest.raises(HTTPException) as exc_info:
            await get_owned_workspace("acme-co", user, mock_registry)

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail["code"] == "BRAND_NOT_FOUND"


class TestWorkspaceCacheDependency:
    def test_is_process_wide(self):
        get_workspace_cache.cache_clear()
        try:
            cache = get_workspace_cache()

            assert isinstance(cache, InMemoryWorkspaceCache)
            assert get_workspace_cache() is cache
        finally:
            get_workspace_cache.cache_clear()


class TestLanguageModel:
    """Tests for the shared model client lifecycle."""

    @pytest.mark.asyncio
    async def test_singleton_serves_analyzer_and_chat(self, reset_language_model):
        settings = AnalyzerSettings(api_key="sk-test", model="gpt-test")

        with patch(
            "brands.dependencies.brain.get_analyzer_settings", return_value=settings
        ):
            client = get_language_model()

            assert get_analyzer() is client
            assert get_chat_model() is client

        await close_language_model()
        assert brain_dependencies._language_model is None

    @pytest.mark.asyncio
    async def test_close_without_client_is_noop(self, reset_language_model):
        await close_language_model()

        assert brain_dependencies._language_model is None


class TestEvidenceProcessor:
    def test_returns_background_function(self):
        assert get_evidence_processor() is process_evidence_in_background

    @pytest.mark.asyncio
    async def test_processes_on_its_own_session(self):
        session = MagicMock()
        session.__aenter__ = AsyncMock(return_value=session)
        session.__aexit__ = AsyncMock(return_value=False)
        factory = MagicMock(return_value=session)
        evidence_id = MagicMock()

        with (
            patch(
                "brands.dependencies.brain.get_session_factory", return_value=factory
            ),
            patch("brands.dependencies.brain.get_analyzer"),
            patch("brands.dependencies.brain.EvidenceLedger") as ledger_cls,
        ):
            ledger_cls.return_value.process_evidence = AsyncMock()

            await process_evidence_in_background(evidence_id, "acme-co")

        ledger_cls.return_value.process_evidence.assert_awaited_once_with(
            evidence_id, "acme-co"
        )
        assert ledger_cls.call_args.kwargs["session"] is session
