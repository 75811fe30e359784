"""IAM presentation layer.

Organizes presentation concerns by aggregate; each package contains its own
routes and models.
"""

from __future__ import annotations

from fastapi import APIRouter

from iam.presentation import auth

router = APIRouter()

router.include_router(auth.router)

__all__ = ["router"]
