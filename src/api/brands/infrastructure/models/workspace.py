"""SQLAlchemy ORM model for the brand_workspaces table."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin, utc_now

BRAND_WORKSPACES_SLUG_CONSTRAINT = "uq_brand_workspaces_slug"


class BrandWorkspaceModel(Base, TimestampMixin):
    """ORM model for brand_workspaces table.

    ``slug`` is globally unique. ``brain_id`` is a weak reference without a
    foreign key; the brain row points back with a real one.
    """

    __tablename__ = "brand_workspaces"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    owner_user_id: Mapped[str] = mapped_column(
        String(26), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(64), nullable=False)
    ai_thread_id: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False)
    onboarding_step: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    brain_id: Mapped[str | None] = mapped_column(String(26), nullable=True)
    last_active_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), insert_default=utc_now, nullable=False
    )

    __table_args__ = (
        UniqueConstraint("slug", name=BRAND_WORKSPACES_SLUG_CONSTRAINT),
        Index("idx_brand_workspaces_owner", "owner_user_id", "created_at"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<BrandWorkspaceModel(id={self.id}, slug={self.slug})>"
