"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import AsyncClient

from hydrate_tracker.adapters.json_file_store import JsonFileStore
from hydrate_tracker.adapters.supabase_friendship_repository import (
    SupabaseFriendshipRepository,
)
from hydrate_tracker.adapters.supabase_identity_provider import (
    SupabaseIdentityProvider,
)
from hydrate_tracker.adapters.supabase_user_repository import SupabaseUserRepository
from hydrate_tracker.adapters.supabase_water_log_repository import (
    SupabaseWaterLogRepository,
)
from hydrate_tracker.config import Settings
from hydrate_tracker.services.entries import EntryService
from hydrate_tracker.services.friendships import FriendshipService
from hydrate_tracker.services.preferences import PreferencesService
from hydrate_tracker.services.profile import ProfileService
from hydrate_tracker.services.session import SessionService
from hydrate_tracker.services.state import AppState


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    state: AppState
    entry_service: EntryService
    profile_service: ProfileService
    preferences_service: PreferencesService
    friendship_service: FriendshipService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = AsyncClient(
        resolved_settings.supabase_url, resolved_settings.supabase_anon_key
    )
    timeout = resolved_settings.remote_timeout_seconds
    state = AppState.load(
        JsonFileStore(Path(resolved_settings.cache_path)),
        default_goal_ml=resolved_settings.default_goal_ml,
    )
    water_log_repository = SupabaseWaterLogRepository(supabase_client, timeout)
    user_repository = SupabaseUserRepository(supabase_client, timeout)
    friendship_repository = SupabaseFriendshipRepository(supabase_client, timeout)
    identity_provider = SupabaseIdentityProvider(supabase_client, timeout)

    entry_service = EntryService(state, water_log_repository)
    profile_service = ProfileService(state, user_repository)
    preferences_service = PreferencesService(state)
    friendship_service = FriendshipService(
        state=state,
        friendships=friendship_repository,
        users=user_repository,
        water_logs=water_log_repository,
    )
    session_service = SessionService(
        state=state,
        identity_provider=identity_provider,
        entry_service=entry_service,
        profile_service=profile_service,
        friendship_service=friendship_service,
    )

    async def close_resources() -> None:
        await supabase_client.postgrest.aclose()

    return AppContainer(
        settings=resolved_settings,
        state=state,
        entry_service=entry_service,
        profile_service=profile_service,
        preferences_service=preferences_service,
        friendship_service=friendship_service,
        session_service=session_service,
        close_resources=close_resources,
    )
