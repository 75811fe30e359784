"""Evidence aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from brands.domain.value_objects import (
    BrandWorkspaceId,
    EvidenceId,
    EvidenceStatus,
    EvidenceType,
)

MAX_EVIDENCE_VALUE_LENGTH = 20_000


@dataclass
class Evidence:
    """One raw or processed input used to synthesize a Brand Brain.

    Only ``complete`` evidence is ever handed to brand analysis.
    """

    id: EvidenceId
    brand_workspace_id: BrandWorkspaceId
    brand_slug: str
    type: EvidenceType
    value: str
    status: EvidenceStatus = EvidenceStatus.PENDING
    analyzed_content: str | None = None
    analysis_summary: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    last_error: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        if not self.value.strip():
            raise ValueError("Evidence value cannot be empty")
        if len(self.value) > MAX_EVIDENCE_VALUE_LENGTH:
            raise ValueError(
                f"Evidence value cannot exceed {MAX_EVIDENCE_VALUE_LENGTH} characters"
            )

    @classmethod
    def submit(
        cls,
        brand_workspace_id: BrandWorkspaceId,
        brand_slug: str,
        type: EvidenceType,
        value: str,
        status: EvidenceStatus = EvidenceStatus.PENDING,
        metadata: dict[str, Any] | None = None,
    ) -> Evidence:
        """Factory method for new evidence, ``pending`` unless stated otherwise."""
        now = datetime.now(UTC)
        return cls(
            id=EvidenceId.generate(),
            brand_workspace_id=brand_workspace_id,
            brand_slug=brand_slug,
            type=type,
            value=value.strip(),
            status=status,
            metadata=dict(metadata or {}),
            created_at=now,
            updated_at=now,
        )

    @property
    def is_complete(self) -> bool:
        return self.status is EvidenceStatus.COMPLETE

    @property
    def content(self) -> str:
        """Best available text: analyzed content, else the raw value."""
        return self.analyzed_content or self.value

    def mark(self, status: EvidenceStatus) -> None:
        self.status = status
        self.updated_at = datetime.now(UTC)

    def complete(self, analyzed_content: str, summary: str | None = None) -> None:
        self.analyzed_content = analyzed_content
        if summary is not None:
            self.analysis_summary = summary
        self.last_error = None
        self.mark(EvidenceStatus.COMPLETE)

    def fail(self, error: str) -> None:
        self.last_error = error
        self.mark(EvidenceStatus.FAILED)
