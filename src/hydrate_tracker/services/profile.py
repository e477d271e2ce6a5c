"""Profile management with a remote mirror."""

import logging
from dataclasses import dataclass, replace
from typing import Protocol
from uuid import UUID

from hydrate_tracker.domain.users import Profile, RemoteProfile, UserSummary
from hydrate_tracker.errors import RemoteError
from hydrate_tracker.services.state import AppState

logger = logging.getLogger(__name__)


class UserRepository(Protocol):
    """Remote persistence interface for user rows."""

    async def get_profile(self, user_id: UUID) -> RemoteProfile | None:
        """Return the stored profile columns for a user."""

    async def upsert_profile(self, user_id: UUID, name: str, goal: int) -> None:
        """Create or update the user's profile columns."""

    async def search_users(self, term: str, limit: int) -> list[UserSummary]:
        """Return users whose name contains the term."""

    async def list_users(self, user_ids: list[UUID]) -> list[UserSummary]:
        """Return users by id."""


@dataclass
class ProfileService:
    """Application service for the local profile."""

    state: AppState
    repository: UserRepository

    @property
    def profile(self) -> Profile:
        return self.state.profile

    async def save_profile(self, name: str | None, goal: int | None) -> Profile:
        """Update name and goal locally and mirror them remotely when signed in."""
        current = self.state.profile
        new_name = name.strip() if name and name.strip() else current.name
        new_goal = goal if goal is not None and goal > 0 else current.goal
        self.state.profile = replace(current, name=new_name, goal=new_goal)
        self.state.save()

        identity = self.state.identity
        if identity is not None:
            try:
                await self.repository.upsert_profile(identity, new_name, new_goal)
            except RemoteError:
                logger.warning("Updating remote profile failed", exc_info=True)
        return self.state.profile

    async def refresh_profile(self) -> Profile:
        """Pull name and goal from the remote users row."""
        identity = self.state.identity
        if identity is None:
            return self.state.profile
        try:
            remote = await self.repository.get_profile(identity)
        except RemoteError:
            logger.warning("Fetching remote profile failed", exc_info=True)
            return self.state.profile
        if remote is not None:
            current = self.state.profile
            self.state.profile = replace(
                current,
                name=remote.name or current.name,
                goal=remote.goal or current.goal,
            )
            self.state.save()
        return self.state.profile
