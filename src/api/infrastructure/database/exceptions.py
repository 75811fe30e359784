"""Database-level exceptions and helpers."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


def violated_constraint(error: IntegrityError) -> str | None:
    """Return the name of the constraint an IntegrityError violated.

    asyncpg exposes ``constraint_name`` on the driver exception; the message
    text is used as a fallback for drivers that do not.
    """
    orig = getattr(error, "orig", None)
    name = getattr(orig, "constraint_name", None)
    if name is None:
        cause = getattr(orig, "__cause__", None)
        name = getattr(cause, "constraint_name", None)
    if name:
        return str(name)

    message = str(orig if orig is not None else error)
    marker = 'constraint "'
    start = message.find(marker)
    if start == -1:
        return None
    start += len(marker)
    end = message.find('"', start)
    return message[start:end] if end != -1 else None
