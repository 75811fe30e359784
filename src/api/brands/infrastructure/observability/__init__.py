"""Domain-Oriented Observability for brands infrastructure."""

from brands.infrastructure.observability.analyzer_probe import (
    AnalyzerClientProbe,
    DefaultAnalyzerClientProbe,
)
from brands.infrastructure.observability.repository_probe import (
    BrandRepositoryProbe,
    DefaultBrandRepositoryProbe,
)

__all__ = [
    "AnalyzerClientProbe",
    "BrandRepositoryProbe",
    "DefaultAnalyzerClientProbe",
    "DefaultBrandRepositoryProbe",
]
