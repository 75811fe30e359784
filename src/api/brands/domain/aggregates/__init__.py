"""Domain aggregates for the brands context."""

from brands.domain.aggregates.brain import BrandBrain
from brands.domain.aggregates.evidence import Evidence
from brands.domain.aggregates.workspace import BrandWorkspace

__all__ = [
    "BrandBrain",
    "BrandWorkspace",
    "Evidence",
]
