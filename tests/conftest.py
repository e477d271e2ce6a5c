"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from hydrate_tracker.config import Settings
from hydrate_tracker.containers import AppContainer
from hydrate_tracker.domain.entries import Entry, WaterLogRow
from hydrate_tracker.domain.friendships import Friendship, FriendshipStatus
from hydrate_tracker.domain.users import RemoteProfile, UserSummary
from hydrate_tracker.errors import ConstraintViolationError, RemoteUnavailableError
from hydrate_tracker.services.cache import InMemoryStore
from hydrate_tracker.services.entries import EntryService, WaterLogRepository
from hydrate_tracker.services.friendships import (
    FriendshipRepository,
    FriendshipService,
)
from hydrate_tracker.services.preferences import PreferencesService
from hydrate_tracker.services.profile import ProfileService, UserRepository
from hydrate_tracker.services.session import IdentityProvider, SessionService
from hydrate_tracker.services.state import AppState

FIXED_NOW = datetime(2024, 5, 10, 15, 30, tzinfo=UTC)


@dataclass
class InMemoryWaterLogRepository(WaterLogRepository):
    """In-memory water log table for tests."""

    rows: list[tuple[str, WaterLogRow]] = field(default_factory=list)
    fail_inserts: bool = False
    fail_reads: bool = False

    def add(self, user_id: UUID, amount: int, logged_at: datetime) -> str:
        row_id = str(uuid4())
        self.rows.append((row_id, WaterLogRow(user_id, amount, logged_at)))
        return row_id

    async def insert_entry(
        self, user_id: UUID, amount: int, logged_at: datetime
    ) -> None:
        if self.fail_inserts:
            raise RemoteUnavailableError("network down")
        self.add(user_id, amount, logged_at)

    async def list_entries(self, user_id: UUID) -> list[Entry]:
        if self.fail_reads:
            raise RemoteUnavailableError("network down")
        owned = [
            Entry(id=row_id, timestamp=row.logged_at, amount=row.amount)
            for row_id, row in self.rows
            if row.user_id == user_id
        ]
        return sorted(owned, key=lambda entry: entry.timestamp, reverse=True)

    async def list_entries_for_identities(
        self, user_ids: list[UUID], since: datetime
    ) -> list[WaterLogRow]:
        if self.fail_reads:
            raise RemoteUnavailableError("network down")
        return [
            row
            for _row_id, row in self.rows
            if row.user_id in user_ids and row.logged_at >= since
        ]


@dataclass
class InMemoryUserRepository(UserRepository):
    """In-memory users table for tests."""

    users: dict[UUID, UserSummary] = field(default_factory=dict)
    upserts: list[tuple[UUID, str, int]] = field(default_factory=list)
    fail: bool = False

    def add(self, name: str, goal: int = 2000, user_id: UUID | None = None) -> UUID:
        resolved = user_id or uuid4()
        self.users[resolved] = UserSummary(id=resolved, name=name, goal=goal)
        return resolved

    async def get_profile(self, user_id: UUID) -> RemoteProfile | None:
        if self.fail:
            raise RemoteUnavailableError("network down")
        user = self.users.get(user_id)
        if user is None:
            return None
        return RemoteProfile(name=user.name, goal=user.goal)

    async def upsert_profile(self, user_id: UUID, name: str, goal: int) -> None:
        if self.fail:
            raise RemoteUnavailableError("network down")
        self.upserts.append((user_id, name, goal))
        self.users[user_id] = UserSummary(id=user_id, name=name, goal=goal)

    async def search_users(self, term: str, limit: int) -> list[UserSummary]:
        matches = [u for u in self.users.values() if term.lower() in u.name.lower()]
        return matches[:limit]

    async def list_users(self, user_ids: list[UUID]) -> list[UserSummary]:
        return [self.users[user_id] for user_id in user_ids if user_id in self.users]


@dataclass
class InMemoryFriendshipRepository(FriendshipRepository):
    """In-memory friendships table.

    Like the remote partial unique index, at most one non-rejected row may
    exist per unordered pair.
    """

    rows: dict[UUID, Friendship] = field(default_factory=dict)
    fail_checks: bool = False
    fail_inserts: bool = False

    async def find_between(self, user_a: UUID, user_b: UUID) -> list[Friendship]:
        if self.fail_checks:
            raise RemoteUnavailableError("check failed")
        pair = {user_a, user_b}
        return [
            row
            for row in self.rows.values()
            if {row.requester_id, row.receiver_id} == pair
        ]

    async def insert_friendship(
        self, requester_id: UUID, receiver_id: UUID
    ) -> Friendship:
        if self.fail_inserts:
            raise RemoteUnavailableError("network down")
        pair = {requester_id, receiver_id}
        for row in self.rows.values():
            if (
                {row.requester_id, row.receiver_id} == pair
                and row.status is not FriendshipStatus.REJECTED
            ):
                raise ConstraintViolationError("duplicate key value")
        created = Friendship(
            id=uuid4(),
            requester_id=requester_id,
            receiver_id=receiver_id,
            status=FriendshipStatus.PENDING,
            created_at=FIXED_NOW + timedelta(seconds=len(self.rows)),
        )
        self.rows[created.id] = created
        return created

    async def update_status(
        self, friendship_id: UUID, status: FriendshipStatus
    ) -> bool:
        row = self.rows.get(friendship_id)
        if row is None or row.status is not FriendshipStatus.PENDING:
            return False
        self.rows[friendship_id] = replace(row, status=status)
        return True

    async def list_pending_for_receiver(self, receiver_id: UUID) -> list[Friendship]:
        pending = [
            row
            for row in self.rows.values()
            if row.receiver_id == receiver_id
            and row.status is FriendshipStatus.PENDING
        ]
        return sorted(pending, key=lambda row: row.created_at, reverse=True)

    async def list_accepted_for(self, user_id: UUID) -> list[Friendship]:
        return [
            row
            for row in self.rows.values()
            if user_id in {row.requester_id, row.receiver_id}
            and row.status is FriendshipStatus.ACCEPTED
        ]


@dataclass
class FakeIdentityProvider(IdentityProvider):
    """Maps known tokens to identities."""

    tokens: dict[str, UUID] = field(default_factory=dict)
    fail: bool = False

    async def get_identity(self, access_token: str) -> UUID | None:
        if self.fail:
            raise RemoteUnavailableError("auth unavailable")
        return self.tokens.get(access_token)


@dataclass
class Services:
    """Services wired against in-memory fakes."""

    state: AppState
    store: InMemoryStore
    water_logs: InMemoryWaterLogRepository
    users: InMemoryUserRepository
    friendships: InMemoryFriendshipRepository
    identity_provider: FakeIdentityProvider
    entry_service: EntryService
    profile_service: ProfileService
    preferences_service: PreferencesService
    friendship_service: FriendshipService
    session_service: SessionService


def build_services() -> Services:
    store = InMemoryStore()
    state = AppState.load(store)
    water_logs = InMemoryWaterLogRepository()
    users = InMemoryUserRepository()
    friendships = InMemoryFriendshipRepository()
    identity_provider = FakeIdentityProvider()
    entry_service = EntryService(state, water_logs, clock=lambda: FIXED_NOW)
    profile_service = ProfileService(state, users)
    friendship_service = FriendshipService(
        state=state, friendships=friendships, users=users, water_logs=water_logs
    )
    session_service = SessionService(
        state=state,
        identity_provider=identity_provider,
        entry_service=entry_service,
        profile_service=profile_service,
        friendship_service=friendship_service,
    )
    return Services(
        state=state,
        store=store,
        water_logs=water_logs,
        users=users,
        friendships=friendships,
        identity_provider=identity_provider,
        entry_service=entry_service,
        profile_service=profile_service,
        preferences_service=PreferencesService(state),
        friendship_service=friendship_service,
        session_service=session_service,
    )


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_anon_key="header.payload.signature",
        cache_path=str(tmp_path / "cache.json"),
    )


@pytest.fixture
def services() -> Services:
    return build_services()


@pytest.fixture
def container(settings: Settings, services: Services) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        state=services.state,
        entry_service=services.entry_service,
        profile_service=services.profile_service,
        preferences_service=services.preferences_service,
        friendship_service=services.friendship_service,
        session_service=services.session_service,
        close_resources=close_resources,
    )
