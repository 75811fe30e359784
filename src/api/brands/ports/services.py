"""Ports for collaborators outside the brands persistence layer."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from brands.domain.aggregates import BrandWorkspace
from brands.domain.value_objects import EvidenceType


@dataclass(frozen=True)
class ChatMessage:
    """One message of a chat transcript sent to the chat model."""

    role: str
    content: str


@runtime_checkable
class IBrandAnalyzer(Protocol):
    """Language-model collaborator that turns evidence into brand insights.

    Implementations must bound every call with a timeout and raise
    AnalyzerTimeoutError for timeouts and AnalyzerError for anything else.
    """

    async def analyze_brand(self, brand_name: str, evidence_text: str) -> Any:
        """Return the parsed JSON analysis object.

        Args:
            brand_name: Display name of the brand
            evidence_text: Labelled evidence block; empty for brand-name-only runs

        Returns:
            Parsed analyzer output, to be normalized by the caller
        """
        ...

    async def summarize_evidence(self, type: EvidenceType, value: str) -> str:
        """Return cleaned, structured text for one evidence item."""
        ...


@runtime_checkable
class IChatModel(Protocol):
    """Streaming conversational model used by onboarding chat."""

    def stream_reply(self, messages: list[ChatMessage]) -> AsyncIterator[str]:
        """Yield reply text chunks.

        Raises:
            AnalyzerError: If the model cannot be reached or the stream breaks
        """
        ...


@runtime_checkable
class IWorkspaceCache(Protocol):
    """Short-lived slug to workspace lookup cache."""

    def get(self, slug: str) -> BrandWorkspace | None:
        """Cached workspace for ``slug``, or None on miss or expiry."""
        ...

    def set(self, workspace: BrandWorkspace) -> None:
        """Cache ``workspace`` under its slug."""
        ...

    def invalidate(self, slug: str) -> None:
        """Drop the entry for ``slug`` if present."""
        ...


@runtime_checkable
class IOwnerDirectory(Protocol):
    """Access to the workspace owner's account in the identity context."""

    async def mark_onboarding_completed(self, owner_user_id: str) -> None:
        """Record that the owner finished onboarding a brand.

        Runs inside the caller's open transaction.
        """
        ...
