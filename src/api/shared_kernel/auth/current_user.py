"""Authenticated request identity shared across bounded contexts."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CurrentUser:
    """The user a verified session cookie belongs to.

    Other bounded contexts receive this instead of the IAM ``User`` aggregate
    so they only depend on the owner id.
    """

    user_id: str
    email: str
