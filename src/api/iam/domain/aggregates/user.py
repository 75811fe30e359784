"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from iam.domain.value_objects import EmailAddress, UserId


@dataclass
class User:
    """A person who signs in with email and password and owns brand workspaces.

    The password is held only as a bcrypt hash; hashing happens in the
    application layer so the domain stays free of crypto dependencies.
    """

    id: UserId
    email: EmailAddress
    password_hash: str
    first_name: str
    last_name: str
    onboarding_completed: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Validate business rules after initialization."""
        if not self.first_name.strip():
            raise ValueError("First name is required.")
        if not self.last_name.strip():
            raise ValueError("Last name is required.")
        if not self.password_hash:
            raise ValueError("Password hash is required.")

    @classmethod
    def register(
        cls,
        email: EmailAddress,
        password_hash: str,
        first_name: str,
        last_name: str,
    ) -> User:
        """Factory method for a newly registered user."""
        now = datetime.now(UTC)
        return cls(
            id=UserId.generate(),
            email=email,
            password_hash=password_hash,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            created_at=now,
            updated_at=now,
        )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def change_password(self, password_hash: str) -> None:
        """Replace the stored password hash."""
        if not password_hash:
            raise ValueError("Password hash is required.")
        self.password_hash = password_hash
        self.updated_at = datetime.now(UTC)

    def complete_onboarding(self) -> None:
        """Mark onboarding finished. Idempotent."""
        if not self.onboarding_completed:
            self.onboarding_completed = True
            self.updated_at = datetime.now(UTC)

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)
