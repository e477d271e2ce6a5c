"""Application state persisted through the local store."""

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

from hydrate_tracker.config import DEFAULT_GOAL_ML, DEFAULT_PRESETS
from hydrate_tracker.domain.entries import Entry
from hydrate_tracker.domain.friendships import FriendView
from hydrate_tracker.domain.users import Profile
from hydrate_tracker.services.cache import LocalStore

logger = logging.getLogger(__name__)

PROFILE_KEY = "hydrate_profile"
ENTRIES_KEY = "hydrate_entries"
FRIENDS_KEY = "hydrate_friends"
PRESETS_KEY = "hydrate_presets"
REMINDERS_KEY = "hydrate_reminders"


@dataclass
class AppState:
    """Everything the app knows locally about the current user.

    Services mutate the fields and call ``save`` to persist them. The
    authenticated identity is held in memory only.
    """

    store: LocalStore
    profile: Profile
    entries: list[Entry] = field(default_factory=list)
    friends: dict[str, FriendView] = field(default_factory=dict)
    presets: list[int] = field(default_factory=lambda: list(DEFAULT_PRESETS))
    reminders: list[str] = field(default_factory=list)
    identity: UUID | None = None

    @classmethod
    def load(
        cls, store: LocalStore, default_goal_ml: int = DEFAULT_GOAL_ML
    ) -> "AppState":
        """Build state from the store, falling back to first-run defaults."""
        profile = _parse_profile(store.get(PROFILE_KEY), default_goal_ml)
        raw_entries = store.get(ENTRIES_KEY, [])
        raw_friends = store.get(FRIENDS_KEY, {})
        raw_presets = store.get(PRESETS_KEY, list(DEFAULT_PRESETS))
        raw_reminders = store.get(REMINDERS_KEY, [])
        entries = [
            entry
            for entry in (_parse_entry(row) for row in _as_list(raw_entries))
            if entry is not None
        ]
        friends: dict[str, FriendView] = {}
        if isinstance(raw_friends, dict):
            for key, row in raw_friends.items():
                view = _parse_friend(row)
                if view is not None:
                    friends[str(key)] = view
        return cls(
            store=store,
            profile=profile,
            entries=entries,
            friends=friends,
            presets=[int(p) for p in _as_list(raw_presets) if _is_positive(p)],
            reminders=[
                r.get("time", "") if isinstance(r, dict) else str(r)
                for r in _as_list(raw_reminders)
            ],
        )

    @property
    def is_authenticated(self) -> bool:
        """Return True when a remote identity is known."""
        return self.identity is not None

    def save(self) -> None:
        """Persist every cached collection."""
        self.store.set(PROFILE_KEY, profile_to_cache(self.profile))
        self.store.set(ENTRIES_KEY, [entry_to_cache(e) for e in self.entries])
        self.store.set(
            FRIENDS_KEY,
            {key: friend_to_cache(view) for key, view in self.friends.items()},
        )
        self.store.set(PRESETS_KEY, list(self.presets))
        self.store.set(REMINDERS_KEY, [{"time": t} for t in self.reminders])


def profile_to_cache(profile: Profile) -> dict[str, object]:
    return {"id": str(profile.id), "name": profile.name, "goal": profile.goal}


def entry_to_cache(entry: Entry) -> dict[str, object]:
    return {
        "id": entry.id,
        "ts": entry.timestamp.isoformat(),
        "amount": entry.amount,
    }


def friend_to_cache(view: FriendView) -> dict[str, object]:
    return {
        "id": str(view.id),
        "name": view.name,
        "goal": view.goal,
        "today_total": view.today_total,
        "percent": view.percent,
    }


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO instant, treating naive values as UTC."""
    if not isinstance(raw, str) or not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _parse_profile(raw: object, default_goal_ml: int) -> Profile:
    if not isinstance(raw, dict):
        return Profile(id=uuid4(), name="You", goal=default_goal_ml)
    try:
        profile_id = UUID(str(raw.get("id")))
    except ValueError:
        logger.warning("Cached profile id is not a UUID, generating a new one")
        profile_id = uuid4()
    goal = raw.get("goal")
    return Profile(
        id=profile_id,
        name=str(raw.get("name") or "You"),
        goal=int(goal) if _is_positive(goal) else default_goal_ml,
    )


def _parse_entry(raw: object) -> Entry | None:
    if not isinstance(raw, dict):
        return None
    timestamp = parse_timestamp(raw.get("ts"))
    amount = raw.get("amount")
    if timestamp is None or not _is_positive(amount):
        return None
    return Entry(
        id=str(raw.get("id") or uuid4()), timestamp=timestamp, amount=int(amount)
    )


def _parse_friend(raw: object) -> FriendView | None:
    if not isinstance(raw, dict):
        return None
    try:
        friend_id = UUID(str(raw.get("id")))
    except ValueError:
        return None
    return FriendView(
        id=friend_id,
        name=str(raw.get("name") or "Friend"),
        goal=int(raw.get("goal") or DEFAULT_GOAL_ML),
        today_total=int(raw.get("today_total") or 0),
        percent=int(raw.get("percent") or 0),
    )


def _as_list(raw: object) -> list[object]:
    return list(raw) if isinstance(raw, list) else []


def _is_positive(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0
