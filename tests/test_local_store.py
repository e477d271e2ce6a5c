"""Tests for the local store and cached application state."""

from uuid import UUID

from hydrate_tracker.adapters.json_file_store import JsonFileStore
from hydrate_tracker.domain.entries import Entry
from hydrate_tracker.services.cache import InMemoryStore
from hydrate_tracker.services.state import (
    ENTRIES_KEY,
    PROFILE_KEY,
    REMINDERS_KEY,
    AppState,
)
from tests.conftest import FIXED_NOW


def test_json_file_store_persists_across_instances(tmp_path) -> None:
    path = tmp_path / "nested" / "cache.json"
    store = JsonFileStore(path)

    assert store.get("missing", [1]) == [1]
    store.set("hydrate_presets", [200, 250])

    reopened = JsonFileStore(path)
    assert reopened.get("hydrate_presets") == [200, 250]


def test_json_file_store_recovers_from_corrupt_file(tmp_path) -> None:
    path = tmp_path / "cache.json"
    path.write_text('{"hydrate_presets": [200, 2', encoding="utf-8")

    state = AppState.load(JsonFileStore(path))
    state.presets.append(750)
    state.save()

    assert state.profile.name == "You"
    assert JsonFileStore(path).get("hydrate_presets") == [200, 250, 500, 750]


def test_in_memory_store_returns_copies() -> None:
    store = InMemoryStore()
    value = [1, 2]
    store.set("key", value)
    value.append(3)

    fetched = store.get("key")
    fetched.append(4)

    assert store.get("key") == [1, 2]


def test_first_run_defaults() -> None:
    state = AppState.load(InMemoryStore(), default_goal_ml=1800)

    assert state.profile.name == "You"
    assert state.profile.goal == 1800
    assert isinstance(state.profile.id, UUID)
    assert state.presets == [200, 250, 500]
    assert state.entries == []
    assert state.identity is None


def test_state_round_trips_through_store(tmp_path) -> None:
    store = JsonFileStore(tmp_path / "cache.json")
    state = AppState.load(store)
    state.entries.append(Entry(id="e1", timestamp=FIXED_NOW, amount=330))
    state.reminders.append("08:00")
    state.save()

    reloaded = AppState.load(JsonFileStore(tmp_path / "cache.json"))

    assert reloaded.profile == state.profile
    assert reloaded.entries == state.entries
    assert reloaded.reminders == ["08:00"]


def test_load_skips_malformed_cached_rows() -> None:
    store = InMemoryStore()
    store.set(PROFILE_KEY, {"id": "id-legacy", "name": "", "goal": -1})
    store.set(
        ENTRIES_KEY,
        [
            {"id": "ok", "ts": "2024-05-10T08:00:00.000Z", "amount": 200},
            {"id": "bad-amount", "ts": "2024-05-10T09:00:00Z", "amount": 0},
            {"id": "bad-ts", "ts": "yesterday", "amount": 100},
        ],
    )
    store.set(REMINDERS_KEY, [{"time": "07:15"}, "21:00"])

    state = AppState.load(store)

    assert [entry.id for entry in state.entries] == ["ok"]
    assert state.entries[0].timestamp.tzinfo is not None
    assert state.profile.name == "You"
    assert state.profile.goal == 2000
    assert state.reminders == ["07:15", "21:00"]
