"""Domain probes for brands application services."""

from brands.application.observability.brain_probe import (
    BrandBrainEngineProbe,
    DefaultBrandBrainEngineProbe,
)
from brands.application.observability.chat_probe import (
    DefaultOnboardingChatProbe,
    OnboardingChatProbe,
)
from brands.application.observability.evidence_probe import (
    DefaultEvidenceLedgerProbe,
    EvidenceLedgerProbe,
)
from brands.application.observability.workspace_probe import (
    DefaultWorkspaceRegistryProbe,
    WorkspaceRegistryProbe,
)

__all__ = [
    "BrandBrainEngineProbe",
    "DefaultBrandBrainEngineProbe",
    "DefaultEvidenceLedgerProbe",
    "DefaultOnboardingChatProbe",
    "DefaultWorkspaceRegistryProbe",
    "EvidenceLedgerProbe",
    "OnboardingChatProbe",
    "WorkspaceRegistryProbe",
]
