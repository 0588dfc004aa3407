"""Shared building blocks: error kinds, use-case errors and the base entity."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

NIL_ID = uuid.UUID(int=0)


def utcnow() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class ErrorType(enum.Enum):
    """Kinds of failure a use case can report."""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    INTERNAL = "internal"


class UseCaseError(Exception):
    """A failure raised by a use case, tagged with its kind."""

    def __init__(self, kind: ErrorType, message: str) -> None:
        super().__init__(message)
        self.kind = ErrorType(kind)
        self.message = message

    def __repr__(self) -> str:
        return f"UseCaseError({self.kind.name}, {self.message!r})"


class RecordNotFoundError(LookupError):
    """Raised by a repository when no stored record matches."""


@dataclass(kw_only=True)
class BaseEntity:
    """Identity and timestamps shared by every stored entity.

    An unset ``id`` is the nil UUID; the repository assigns one on create.
    Unset timestamps are ``None``.
    """

    id: uuid.UUID = NIL_ID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    deleted_at: Optional[datetime] = None

    def touch(self) -> None:
        """Mark the entity as modified now."""
        self.updated_at = utcnow()