"""Supabase-backed user repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import AsyncClient

from hydrate_tracker.adapters.supabase_support import parse_int, run_query
from hydrate_tracker.config import DEFAULT_GOAL_ML
from hydrate_tracker.domain.users import RemoteProfile, UserSummary
from hydrate_tracker.services.profile import UserRepository


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for the ``users`` table."""

    client: AsyncClient
    timeout_seconds: float = 10.0

    async def get_profile(self, user_id: UUID) -> RemoteProfile | None:
        """Return the profile columns for a user, if the row exists."""
        rows = await run_query(
            self.client.table("users")
            .select("username, daily_goal_ml")
            .eq("id", str(user_id))
            .limit(1),
            self.timeout_seconds,
        )
        if not rows:
            return None
        row = rows[0]
        goal = parse_int(row.get("daily_goal_ml"))
        return RemoteProfile(
            name=str(row["username"]) if row.get("username") else None,
            goal=goal if goal > 0 else None,
        )

    async def upsert_profile(self, user_id: UUID, name: str, goal: int) -> None:
        """Create or update the user's name and goal."""
        await run_query(
            self.client.table("users").upsert(
                {"id": str(user_id), "username": name, "daily_goal_ml": goal}
            ),
            self.timeout_seconds,
        )

    async def search_users(self, term: str, limit: int) -> list[UserSummary]:
        """Case-insensitive substring search on usernames."""
        rows = await run_query(
            self.client.table("users")
            .select("id, username, daily_goal_ml")
            .ilike("username", f"%{term}%")
            .limit(limit),
            self.timeout_seconds,
        )
        return [_parse_user(row) for row in rows]

    async def list_users(self, user_ids: list[UUID]) -> list[UserSummary]:
        """Return users by id."""
        if not user_ids:
            return []
        rows = await run_query(
            self.client.table("users")
            .select("id, username, daily_goal_ml")
            .in_("id", [str(user_id) for user_id in user_ids]),
            self.timeout_seconds,
        )
        return [_parse_user(row) for row in rows]


def _parse_user(row: dict[str, object]) -> UserSummary:
    goal = parse_int(row.get("daily_goal_ml"))
    return UserSummary(
        id=UUID(str(row["id"])),
        name=str(row.get("username") or "Unknown"),
        goal=goal if goal > 0 else DEFAULT_GOAL_ML,
    )
