"""SQLAlchemy ORM models for the brands bounded context."""

from brands.infrastructure.models.brain import (
    BRAND_BRAINS_WORKSPACE_CONSTRAINT,
    BrandBrainModel,
)
from brands.infrastructure.models.evidence import EvidenceModel
from brands.infrastructure.models.workspace import (
    BRAND_WORKSPACES_SLUG_CONSTRAINT,
    BrandWorkspaceModel,
)

__all__ = [
    "BRAND_BRAINS_WORKSPACE_CONSTRAINT",
    "BRAND_WORKSPACES_SLUG_CONSTRAINT",
    "BrandBrainModel",
    "BrandWorkspaceModel",
    "EvidenceModel",
]
