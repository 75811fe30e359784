"""Database infrastructure - engine, sessions and declarative base."""

from infrastructure.database.exceptions import DatabaseError, violated_constraint

__all__ = [
    "DatabaseError",
    "violated_constraint",
]
