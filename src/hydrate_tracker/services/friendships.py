"""Friend request lifecycle and friend progress views."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta
from typing import Protocol
from uuid import UUID

from hydrate_tracker.config import DEFAULT_GOAL_ML
from hydrate_tracker.domain.entries import Entry
from hydrate_tracker.domain.friendships import (
    FriendLink,
    Friendship,
    FriendshipStatus,
    FriendView,
    PendingRequest,
)
from hydrate_tracker.domain.stats import DailyTotal
from hydrate_tracker.domain.users import UserSummary
from hydrate_tracker.errors import (
    AlreadyFriendsError,
    DuplicatePendingError,
    RemoteError,
    RequestNotPendingError,
    RequestRejectedError,
    SelfReferenceError,
)
from hydrate_tracker.services.entries import WaterLogRepository
from hydrate_tracker.services.profile import UserRepository
from hydrate_tracker.services.state import AppState
from hydrate_tracker.services.stats import (
    WEEK_DAYS,
    percent_of_goal,
    totals_by_user,
    weekly_series,
)

logger = logging.getLogger(__name__)

SEARCH_LIMIT = 20
UNKNOWN_USER = "Unknown"


class FriendshipRepository(Protocol):
    """Remote persistence interface for friendship rows."""

    async def find_between(self, user_a: UUID, user_b: UUID) -> list[Friendship]:
        """Return rows for the pair in either direction."""

    async def insert_friendship(
        self, requester_id: UUID, receiver_id: UUID
    ) -> Friendship:
        """Insert a pending request and return it."""

    async def update_status(
        self, friendship_id: UUID, status: FriendshipStatus
    ) -> bool:
        """Answer a pending row; return False when no pending row matched."""

    async def list_pending_for_receiver(self, receiver_id: UUID) -> list[Friendship]:
        """Return pending requests addressed to the user, newest first."""

    async def list_accepted_for(self, user_id: UUID) -> list[Friendship]:
        """Return accepted rows where the user is on either side."""


@dataclass
class FriendshipService:
    """Manages friend requests and materializes friend progress."""

    state: AppState
    friendships: FriendshipRepository
    users: UserRepository
    water_logs: WaterLogRepository

    async def send_request(self, self_id: UUID, other_id: UUID) -> Friendship:
        """Create a pending request from ``self_id`` to ``other_id``.

        The duplicate check is best effort. When it fails the insert still
        runs and the remote uniqueness constraint decides.
        """
        if self_id == other_id:
            raise SelfReferenceError("Cannot add yourself as a friend")

        try:
            existing = await self.friendships.find_between(self_id, other_id)
        except RemoteError:
            logger.warning("Friend check failed", exc_info=True)
            existing = []

        statuses = {row.status for row in existing}
        if FriendshipStatus.PENDING in statuses:
            raise DuplicatePendingError(
                "A friend request is already pending between you and this user"
            )
        if FriendshipStatus.ACCEPTED in statuses:
            raise AlreadyFriendsError("You are already friends with this user")
        if FriendshipStatus.REJECTED in statuses:
            raise RequestRejectedError(
                "A friend request between you and this user was rejected"
            )

        created = await self.friendships.insert_friendship(self_id, other_id)
        logger.info("Friend request %s sent to %s", created.id, other_id)
        return created

    async def respond(
        self, request_id: UUID, outcome: FriendshipStatus | str
    ) -> FriendshipStatus:
        """Accept or reject a pending request.

        Answered requests are terminal, so a second response fails.
        """
        status = FriendshipStatus(outcome)
        if status is FriendshipStatus.PENDING:
            raise ValueError("A request can only be accepted or rejected")
        if not await self.friendships.update_status(request_id, status):
            raise RequestNotPendingError(
                "Friend request was not found or was already answered"
            )
        logger.info("Friend request %s %s", request_id, status.value)
        return status

    async def list_pending(self, self_id: UUID) -> list[PendingRequest]:
        """Return incoming pending requests with requester names."""
        rows = await self.friendships.list_pending_for_receiver(self_id)
        if not rows:
            return []
        names = {
            user.id: user.name
            for user in await self.users.list_users(
                _unique([row.requester_id for row in rows])
            )
        }
        return [
            PendingRequest(
                id=row.id,
                requester_id=row.requester_id,
                requester_name=names.get(row.requester_id, UNKNOWN_USER),
                created_at=row.created_at,
            )
            for row in rows
        ]

    async def list_accepted(self, self_id: UUID) -> list[FriendLink]:
        """Return accepted friendships resolved to the other party."""
        rows = await self.friendships.list_accepted_for(self_id)
        return [
            FriendLink(friendship_id=row.id, friend_id=row.other_party(self_id))
            for row in rows
            if row.status is FriendshipStatus.ACCEPTED
        ]

    async def load_friend_views(
        self, self_id: UUID, today: date | None = None
    ) -> list[FriendView]:
        """Build today's progress for every accepted friend and cache it."""
        day = today or datetime.now(tz=UTC).date()
        links = await self.list_accepted(self_id)
        friend_ids = _unique([link.friend_id for link in links])
        views: list[FriendView] = []
        if friend_ids:
            users = await self.users.list_users(friend_ids)
            since = datetime.combine(day, time.min, tzinfo=UTC)
            rows = await self.water_logs.list_entries_for_identities(friend_ids, since)
            totals = totals_by_user(rows, day)
            for user in users:
                total = totals.get(user.id, 0)
                views.append(
                    FriendView(
                        id=user.id,
                        name=user.name,
                        goal=user.goal,
                        today_total=total,
                        percent=percent_of_goal(total, user.goal, clamp=False),
                    )
                )
        self.state.friends = {str(view.id): view for view in views}
        self.state.save()
        return views

    async def friend_week(
        self, friend_id: UUID, reference_date: date | None = None
    ) -> list[DailyTotal]:
        """Return a friend's last seven days; remote failure yields zeros."""
        day = reference_date or datetime.now(tz=UTC).date()
        cached = self.state.friends.get(str(friend_id))
        goal = cached.goal if cached else DEFAULT_GOAL_ML
        since = datetime.combine(
            day - timedelta(days=WEEK_DAYS - 1), time.min, tzinfo=UTC
        )
        try:
            rows = await self.water_logs.list_entries_for_identities([friend_id], since)
        except RemoteError:
            logger.warning("Fetching friend week failed", exc_info=True)
            rows = []
        entries = [
            Entry(
                id=f"{row.user_id}:{index}", timestamp=row.logged_at, amount=row.amount
            )
            for index, row in enumerate(rows)
            if row.user_id == friend_id
        ]
        return weekly_series(entries, day, goal)

    async def search_users(self, term: str) -> list[UserSummary]:
        """Find users by display name."""
        cleaned = term.strip()
        if not cleaned:
            return []
        return await self.users.search_users(cleaned, SEARCH_LIMIT)

    def remove_cached_friend(self, friend_id: UUID) -> bool:
        """Drop a friend from the local snapshot without touching the remote."""
        if self.state.friends.pop(str(friend_id), None) is None:
            return False
        self.state.save()
        return True


def _unique(ids: list[UUID]) -> list[UUID]:
    return list(dict.fromkeys(ids))
