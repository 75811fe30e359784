"""Value objects for IAM domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from ulid import ULID

_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class UserId:
    """Identifier for a User aggregate.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UserId:
        """Generate a new UserId using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> UserId:
        """Create UserId from string value.

        Args:
            value: ULID string

        Returns:
            UserId instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid UserId: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class EmailAddress:
    """A login email, stored trimmed and lowercased.

    Two addresses that differ only in case or surrounding whitespace are the
    same account.
    """

    value: str

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, raw: str) -> EmailAddress:
        """Normalize and validate a raw email string.

        Raises:
            ValueError: If the address is not shaped like an email
        """
        normalized = raw.strip().lower()
        if not _EMAIL_PATTERN.match(normalized):
            raise ValueError("Please enter a valid email address.")
        return cls(value=normalized)
