"""Onboarding routes and models: state, brain, analysis, evidence and chat."""

from brands.presentation.onboarding.routes import router

__all__ = ["router"]
