"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories and collaborators without
specifying implementation details.
"""

from iam.ports.repositories import IUserRepository
from iam.ports.session import IPasswordResetNotifier, ISessionStore

__all__ = [
    "IPasswordResetNotifier",
    "ISessionStore",
    "IUserRepository",
]
