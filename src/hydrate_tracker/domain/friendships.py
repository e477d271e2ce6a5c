"""Domain models for the friend graph."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class FriendshipStatus(str, Enum):
    """Lifecycle state of a friend request."""

    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Friendship:
    """A directed friend request between two users."""

    id: UUID
    requester_id: UUID
    receiver_id: UUID
    status: FriendshipStatus
    created_at: datetime | None = None

    def other_party(self, identity: UUID) -> UUID:
        """Return the identity on the opposite side of the row."""
        if self.requester_id == identity:
            return self.receiver_id
        return self.requester_id


@dataclass(frozen=True)
class PendingRequest:
    """Incoming request joined with the requester's display name."""

    id: UUID
    requester_id: UUID
    requester_name: str
    created_at: datetime | None


@dataclass(frozen=True)
class FriendLink:
    """Accepted friendship resolved to the other party."""

    friendship_id: UUID
    friend_id: UUID


@dataclass(frozen=True)
class FriendView:
    """Today's progress of an accepted friend."""

    id: UUID
    name: str
    goal: int
    today_total: int
    percent: int
