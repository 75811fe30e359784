"""Application services for the brands bounded context."""

from brands.application.services.brand_brain_engine import BrandBrainEngine
from brands.application.services.evidence_ledger import EvidenceLedger
from brands.application.services.onboarding_chat import OnboardingChatService
from brands.application.services.workspace_registry import WorkspaceRegistry

__all__ = [
    "BrandBrainEngine",
    "EvidenceLedger",
    "OnboardingChatService",
    "WorkspaceRegistry",
]
