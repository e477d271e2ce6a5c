"""Sign-in handling and the startup pull from the remote store."""

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from hydrate_tracker.domain.friendships import FriendView, PendingRequest
from hydrate_tracker.errors import RemoteError
from hydrate_tracker.services.entries import EntryService
from hydrate_tracker.services.friendships import FriendshipService
from hydrate_tracker.services.profile import ProfileService
from hydrate_tracker.services.state import AppState

logger = logging.getLogger(__name__)


class IdentityProvider(Protocol):
    """Resolves access tokens to remote identities."""

    async def get_identity(self, access_token: str) -> UUID | None:
        """Return the user id behind the token, if it is valid."""


@dataclass
class BootstrapResult:
    """What the app knows right after start-up."""

    identity: UUID | None
    pending: list[PendingRequest] = field(default_factory=list)
    friends: list[FriendView] = field(default_factory=list)


@dataclass
class SessionService:
    """Owns the authenticated identity for the running app."""

    state: AppState
    identity_provider: IdentityProvider
    entry_service: EntryService
    profile_service: ProfileService
    friendship_service: FriendshipService

    async def sign_in(self, access_token: str | None) -> UUID | None:
        """Resolve the token and adopt its identity.

        A missing or rejected token leaves the current session as it was.
        """
        if not access_token:
            return None
        try:
            identity = await self.identity_provider.get_identity(access_token)
        except RemoteError:
            logger.warning("Resolving signed-in user failed", exc_info=True)
            return None
        if identity is None:
            logger.info("Access token was not accepted")
            return None
        self.state.identity = identity
        self.state.profile = replace(self.state.profile, id=identity)
        self.state.save()
        logger.info("Signed in as %s", identity)
        return identity

    def sign_out(self) -> None:
        """Forget the identity; cached data stays in place."""
        self.state.identity = None

    async def bootstrap(self, access_token: str | None) -> BootstrapResult:
        """Sign in and pull profile, entries and friends from the remote."""
        identity = await self.sign_in(access_token)
        if identity is None:
            return BootstrapResult(identity=None)
        await self.profile_service.refresh_profile()
        await self.entry_service.refresh_from_remote()
        result = BootstrapResult(identity=identity)
        try:
            result.pending = await self.friendship_service.list_pending(identity)
        except RemoteError:
            logger.warning("Loading pending requests failed", exc_info=True)
        try:
            result.friends = await self.friendship_service.load_friend_views(identity)
        except RemoteError:
            logger.warning("Loading accepted friends failed", exc_info=True)
        return result
