"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from iam.domain.aggregates import User
from iam.domain.value_objects import EmailAddress, UserId
from iam.infrastructure.models import USERS_EMAIL_CONSTRAINT, UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import EmailAlreadyRegisteredError
from iam.ports.repositories import IUserRepository
from infrastructure.database import violated_constraint


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Does not open transactions; the calling service wraps work in
    ``session.begin()``.
    """

    def __init__(
        self, session: AsyncSession, probe: UserRepositoryProbe | None = None
    ) -> None:
        """Initialize repository with database session and probe.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Insert or update a user aggregate.

        Args:
            user: The User aggregate to persist

        Raises:
            EmailAlreadyRegisteredError: If another user holds the email
        """
        stmt = select(UserModel).where(UserModel.id == user.id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model:
            model.email = user.email.value
            model.password_hash = user.password_hash
            model.first_name = user.first_name
            model.last_name = user.last_name
            model.onboarding_completed = user.onboarding_completed
            model.updated_at = user.updated_at
        else:
            model = UserModel(
                id=user.id.value,
                email=user.email.value,
                password_hash=user.password_hash,
                first_name=user.first_name,
                last_name=user.last_name,
                onboarding_completed=user.onboarding_completed,
                created_at=user.created_at,
                updated_at=user.updated_at,
            )
            self._session.add(model)

        try:
            await self._session.flush()
        except IntegrityError as e:
            if violated_constraint(e) == USERS_EMAIL_CONSTRAINT:
                self._probe.duplicate_email(user.email.value)
                raise EmailAlreadyRegisteredError() from e
            raise

        self._probe.user_saved(user.id.value, user.email.value)

    async def get_by_id(self, user_id: UserId) -> User | None:
        """Retrieve a user by their ID."""
        stmt = select(UserModel).where(UserModel.id == user_id.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(user_id=user_id.value)
            return None

        self._probe.user_retrieved(user_id.value)
        return self._to_domain(model)

    async def get_by_email(self, email: EmailAddress) -> User | None:
        """Retrieve a user by normalized email."""
        stmt = select(UserModel).where(UserModel.email == email.value)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.user_not_found(email=email.value)
            return None

        self._probe.user_retrieved(model.id)
        return self._to_domain(model)

    def _to_domain(self, model: UserModel) -> User:
        """Convert ORM model to domain aggregate."""
        return User(
            id=UserId(value=model.id),
            email=EmailAddress(value=model.email),
            password_hash=model.password_hash,
            first_name=model.first_name,
            last_name=model.last_name,
            onboarding_completed=model.onboarding_completed,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
