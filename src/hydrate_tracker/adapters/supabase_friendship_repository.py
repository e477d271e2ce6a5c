"""Supabase repository for friendships."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from hydrate_tracker.adapters.supabase_support import run_query
from hydrate_tracker.domain.friendships import Friendship, FriendshipStatus
from hydrate_tracker.errors import RemoteUnavailableError
from hydrate_tracker.services.friendships import FriendshipRepository
from hydrate_tracker.services.state import parse_timestamp

_COLUMNS = "id, requester_id, receiver_id, status, created_at"


@dataclass
class SupabaseFriendshipRepository(FriendshipRepository):
    """Supabase implementation for the ``friendships`` table."""

    client: AsyncClient
    timeout_seconds: float = 10.0

    async def find_between(self, user_a: UUID, user_b: UUID) -> list[Friendship]:
        """Return rows for the pair in either direction."""
        condition = (
            f"and(requester_id.eq.{user_a},receiver_id.eq.{user_b}),"
            f"and(requester_id.eq.{user_b},receiver_id.eq.{user_a})"
        )
        rows = await run_query(
            self.client.table("friendships").select(_COLUMNS).or_(condition),
            self.timeout_seconds,
        )
        return [_parse_row(row) for row in rows]

    async def insert_friendship(
        self, requester_id: UUID, receiver_id: UUID
    ) -> Friendship:
        """Insert a pending request and return the stored row."""
        rows = await run_query(
            self.client.table("friendships").insert(
                {
                    "requester_id": str(requester_id),
                    "receiver_id": str(receiver_id),
                    "status": FriendshipStatus.PENDING.value,
                }
            ),
            self.timeout_seconds,
        )
        if not rows:
            raise RemoteUnavailableError("Failed to create friendship in Supabase")
        return _parse_row(rows[0])

    async def update_status(
        self, friendship_id: UUID, status: FriendshipStatus
    ) -> bool:
        """Answer a pending row; return False when no pending row matched."""
        rows = await run_query(
            self.client.table("friendships")
            .update({"status": status.value})
            .eq("id", str(friendship_id))
            .eq("status", FriendshipStatus.PENDING.value),
            self.timeout_seconds,
        )
        return bool(rows)

    async def list_pending_for_receiver(self, receiver_id: UUID) -> list[Friendship]:
        """Return pending requests for the receiver, newest first."""
        rows = await run_query(
            self.client.table("friendships")
            .select(_COLUMNS)
            .eq("receiver_id", str(receiver_id))
            .eq("status", FriendshipStatus.PENDING.value)
            .order("created_at", desc=True),
            self.timeout_seconds,
        )
        return [_parse_row(row) for row in rows]

    async def list_accepted_for(self, user_id: UUID) -> list[Friendship]:
        """Return accepted rows where the user is requester or receiver."""
        rows: list[dict[str, object]] = []
        for column in ("requester_id", "receiver_id"):
            rows.extend(
                await run_query(
                    self.client.table("friendships")
                    .select(_COLUMNS)
                    .eq(column, str(user_id))
                    .eq("status", FriendshipStatus.ACCEPTED.value),
                    self.timeout_seconds,
                )
            )
        return [_parse_row(row) for row in rows]


def _parse_row(row: dict[str, object]) -> Friendship:
    return Friendship(
        id=UUID(str(row["id"])),
        requester_id=UUID(str(row["requester_id"])),
        receiver_id=UUID(str(row["receiver_id"])),
        status=FriendshipStatus(str(row.get("status") or "pending")),
        created_at=parse_timestamp(row.get("created_at")),
    )
