"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures request-scoped and domain-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        user_id: Identifier of the user performing the operation (if applicable).
        brand_slug: Slug of the brand workspace being operated on (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(user_id="01H...", brand_slug="acme-co")
        probe = DefaultBrandBrainEngineProbe().with_context(context)
    """

    request_id: str | None = None
    user_id: str | None = None
    brand_slug: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.user_id is not None:
            result["user_id"] = self.user_id
        if self.brand_slug is not None:
            result["brand_slug"] = self.brand_slug
        result.update(self.extra)
        return result

    def with_brand(self, brand_slug: str) -> ObservationContext:
        """Create a new context scoped to a brand workspace."""
        return replace(self, brand_slug=brand_slug)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
