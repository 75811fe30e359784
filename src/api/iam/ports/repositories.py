"""Repository port for IAM bounded context.

Defines the interface for persisting and retrieving users.
Implementations manage PostgreSQL storage only; transactions are owned by
the calling application service.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, UserId


@runtime_checkable
class IUserRepository(Protocol):
    """Repository for User aggregate persistence."""

    async def save(self, user: User) -> None:
        """Persist a user aggregate (insert or update).

        Args:
            user: The User aggregate to persist

        Raises:
            EmailAlreadyRegisteredError: If the email belongs to another user
        """
        ...

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID.

        Args:
            user_id: The unique identifier of the user

        Returns:
            The User aggregate, or None if not found
        """
        ...

    async def get_by_email(self, email: EmailAddress) -> User | None:
        """Retrieve a user by normalized email.

        Args:
            email: The normalized email address

        Returns:
            The User aggregate, or None if not found
        """
        ...
