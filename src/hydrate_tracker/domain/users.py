"""Domain models for user profiles."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class Profile:
    """The local user's profile."""

    id: UUID
    name: str
    goal: int


@dataclass(frozen=True)
class RemoteProfile:
    """Profile columns stored on the remote users row."""

    name: str | None
    goal: int | None


@dataclass(frozen=True)
class UserSummary:
    """Public view of another user."""

    id: UUID
    name: str
    goal: int
