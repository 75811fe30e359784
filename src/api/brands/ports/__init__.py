"""Ports (interfaces) for the brands bounded context."""

from brands.ports.repositories import (
    IBrandBrainRepository,
    IBrandWorkspaceRepository,
    IEvidenceRepository,
)
from brands.ports.services import (
    ChatMessage,
    IBrandAnalyzer,
    IChatModel,
    IOwnerDirectory,
    IWorkspaceCache,
)

__all__ = [
    "ChatMessage",
    "IBrandAnalyzer",
    "IBrandBrainRepository",
    "IBrandWorkspaceRepository",
    "IChatModel",
    "IEvidenceRepository",
    "IOwnerDirectory",
    "IWorkspaceCache",
]
