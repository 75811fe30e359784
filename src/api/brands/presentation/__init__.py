"""Brands presentation layer.

Workspace routes live under ``/brand-workspaces`` and ``/brands/{slug}``;
onboarding routes under ``/brands/{slug}/onboarding``.
"""

from __future__ import annotations

from fastapi import APIRouter

from brands.presentation import onboarding, workspaces

router = APIRouter()

router.include_router(workspaces.router)
router.include_router(workspaces.brand_router)
router.include_router(onboarding.router)

__all__ = ["router"]
