"""Reconciles the locally cached entry log with the remote water logs."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from hydrate_tracker.domain.entries import Entry, WaterLogRow
from hydrate_tracker.errors import RemoteError
from hydrate_tracker.services.state import AppState
from hydrate_tracker.services.stats import date_key

logger = logging.getLogger(__name__)


class WaterLogRepository(Protocol):
    """Remote persistence interface for water logs."""

    async def insert_entry(
        self, user_id: UUID, amount: int, logged_at: datetime
    ) -> None:
        """Insert a water log row for the user."""

    async def list_entries(self, user_id: UUID) -> list[Entry]:
        """Return all of a user's water logs, newest first."""

    async def list_entries_for_identities(
        self, user_ids: list[UUID], since: datetime
    ) -> list[WaterLogRow]:
        """Return water logs of several users logged at or after ``since``."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class EntryService:
    """Records drinks remote-first and keeps the local cache in sync."""

    state: AppState
    repository: WaterLogRepository
    clock: Callable[[], datetime] = _utcnow

    async def add_entry(self, amount: int) -> list[Entry]:
        """Record a drink and return the resulting local entry collection.

        Authenticated users write to the remote store and then pull the
        authoritative log. When the remote write fails the drink is kept
        locally instead.
        """
        if amount <= 0:
            logger.info("Ignoring non-positive amount %s", amount)
            return list(self.state.entries)

        identity = self.state.identity
        if identity is not None:
            try:
                await self.repository.insert_entry(identity, amount, self.clock())
            except RemoteError:
                logger.warning("Insert failed, falling back to local", exc_info=True)
            else:
                await self.refresh_from_remote()
                return list(self.state.entries)

        self._insert_local(amount)
        return list(self.state.entries)

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry from the local cache only."""
        remaining = [entry for entry in self.state.entries if entry.id != entry_id]
        if len(remaining) == len(self.state.entries):
            return False
        self.state.entries = remaining
        self.state.save()
        return True

    async def refresh_from_remote(self) -> bool:
        """Replace local entries with the remote log for the signed-in user."""
        identity = self.state.identity
        if identity is None:
            return False
        try:
            entries = await self.repository.list_entries(identity)
        except RemoteError:
            logger.warning("Fetching entries from remote failed", exc_info=True)
            return False
        self.state.entries = entries
        self.state.save()
        return True

    def today_entries(self, today: date | None = None) -> list[Entry]:
        """Return today's entries, newest first."""
        day = today or date_key(self.clock())
        todays = [e for e in self.state.entries if date_key(e.timestamp) == day]
        return sorted(todays, key=lambda entry: entry.timestamp, reverse=True)

    def _insert_local(self, amount: int) -> Entry:
        entry = Entry(id=str(uuid4()), timestamp=self.clock(), amount=amount)
        self.state.entries.append(entry)
        self.state.save()
        return entry
