"""Response envelopes shared by every HTTP endpoint.

All endpoints answer with ``{"success": true, "data": ...}`` on success and
``{"success": false, "error": "...", "code"?: "...", "details"?: ...}`` on
failure, so clients never need to special-case transport-level errors.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class ApiModel(BaseModel):
    """Base for request and response bodies.

    Fields are declared in snake_case and exchanged as camelCase; requests
    may use either spelling.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessEnvelope(ApiModel, Generic[T]):
    """Successful response wrapper."""

    success: bool = Field(default=True, description="Always true on success")
    data: T = Field(..., description="Endpoint payload")


class ErrorEnvelope(ApiModel):
    """Failed response wrapper."""

    success: bool = Field(default=False, description="Always false on failure")
    error: str = Field(..., description="Human-readable error message")
    code: str | None = Field(
        default=None,
        description="Machine-readable error code",
        examples=["ANALYSIS_IN_PROGRESS"],
    )
    details: Any = Field(default=None, description="Extra error context")

    def to_body(self) -> dict[str, Any]:
        """Serialize without absent optional keys."""
        return self.model_dump(exclude_none=True, by_alias=True)
