"""Brand workspace routes and models."""

from brands.presentation.workspaces.routes import brand_router, router

__all__ = ["brand_router", "router"]
