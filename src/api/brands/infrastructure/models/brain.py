"""SQLAlchemy ORM model for the brand_brains table."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

BRAND_BRAINS_WORKSPACE_CONSTRAINT = "uq_brand_brains_workspace"


class BrandBrainModel(Base, TimestampMixin):
    """ORM model for brand_brains table.

    One row per workspace: ``brand_workspace_id`` is the only unique key.
    ``brand_slug`` is an indexed, non-unique lookup column.
    """

    __tablename__ = "brand_brains"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    brand_workspace_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("brand_workspaces.id", ondelete="CASCADE"),
        nullable=False,
    )
    brand_slug: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    summary: Mapped[str] = mapped_column(Text, nullable=False, default="")
    audience: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tone: Mapped[str] = mapped_column(Text, nullable=False, default="")
    offers: Mapped[str] = mapped_column(Text, nullable=False, default="")
    pillars: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    recommendations: Mapped[list[str]] = mapped_column(
        JSONB, nullable=False, default=list
    )
    competitors: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)
    channels: Mapped[list[str]] = mapped_column(JSONB, nullable=False, default=list)

    status: Mapped[str] = mapped_column(String(20), nullable=False)
    onboarding_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    is_activated: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    analysis_method: Mapped[str | None] = mapped_column(String(32), nullable=True)
    analysis_started_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    analysis_completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    last_analyzed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    analysis_duration_ms: Mapped[int | None] = mapped_column(Integer, nullable=True)
    evidence_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_error: Mapped[str | None] = mapped_column(Text, nullable=True)
    activated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    __table_args__ = (
        UniqueConstraint(
            "brand_workspace_id", name=BRAND_BRAINS_WORKSPACE_CONSTRAINT
        ),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<BrandBrainModel(id={self.id}, brand_slug={self.brand_slug}, "
            f"step={self.onboarding_step})>"
        )
