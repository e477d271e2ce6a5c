"""Supabase repository for water logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import AsyncClient

from hydrate_tracker.adapters.supabase_support import parse_int, run_query
from hydrate_tracker.domain.entries import Entry, WaterLogRow
from hydrate_tracker.services.entries import WaterLogRepository
from hydrate_tracker.services.state import parse_timestamp


@dataclass
class SupabaseWaterLogRepository(WaterLogRepository):
    """Supabase implementation for the ``water_logs`` table."""

    client: AsyncClient
    timeout_seconds: float = 10.0

    async def insert_entry(
        self, user_id: UUID, amount: int, logged_at: datetime
    ) -> None:
        """Insert a water log row."""
        await run_query(
            self.client.table("water_logs").insert(
                {
                    "user_id": str(user_id),
                    "amount_ml": amount,
                    "logged_at": logged_at.isoformat(),
                }
            ),
            self.timeout_seconds,
        )

    async def list_entries(self, user_id: UUID) -> list[Entry]:
        """Return a user's water logs, newest first."""
        rows = await run_query(
            self.client.table("water_logs")
            .select("id, amount_ml, logged_at")
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True),
            self.timeout_seconds,
        )
        entries = []
        for row in rows:
            logged_at = parse_timestamp(row.get("logged_at"))
            if logged_at is None:
                continue
            entries.append(
                Entry(
                    id=str(row["id"]),
                    timestamp=logged_at,
                    amount=parse_int(row.get("amount_ml")),
                )
            )
        return entries

    async def list_entries_for_identities(
        self, user_ids: list[UUID], since: datetime
    ) -> list[WaterLogRow]:
        """Return logs of several users since a point in time."""
        if not user_ids:
            return []
        rows = await run_query(
            self.client.table("water_logs")
            .select("user_id, amount_ml, logged_at")
            .in_("user_id", [str(user_id) for user_id in user_ids])
            .gte("logged_at", since.isoformat()),
            self.timeout_seconds,
        )
        parsed = []
        for row in rows:
            logged_at = parse_timestamp(row.get("logged_at"))
            if logged_at is None or not row.get("user_id"):
                continue
            parsed.append(
                WaterLogRow(
                    user_id=UUID(str(row["user_id"])),
                    amount=parse_int(row.get("amount_ml")),
                    logged_at=logged_at,
                )
            )
        return parsed
