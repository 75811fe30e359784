"""SQLAlchemy ORM model for the evidence table."""

from typing import Any

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class EvidenceModel(Base, TimestampMixin):
    """ORM model for evidence table.

    The ``metadata`` column is mapped as ``metadata_`` because the declarative
    base reserves ``metadata``.
    """

    __tablename__ = "evidence"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    brand_workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("brand_workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    brand_slug: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[str] = mapped_column(String(32), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    analyzed_content: Mapped[str | None] = mapped_column(Text, nullable=True)
    analysis_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    metadata_: Mapped[dict[str, Any]] = mapped_column(
        "metadata", JSONB, nullable=False, default=dict
    )
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("idx_evidence_brand_status", "brand_workspace_id", "status", "created_at"),
        Index("idx_evidence_slug_id", "brand_slug", "id"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<EvidenceModel(id={self.id}, type={self.type}, status={self.status})>"
