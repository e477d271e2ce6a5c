"""Local key-value store abstractions."""

import copy
from dataclasses import dataclass
from typing import Protocol


class LocalStore(Protocol):
    """Durable key-value store for cached application data."""

    def get(self, key: str, default: object = None) -> object:
        """Return the stored value or the default when missing."""

    def set(self, key: str, value: object) -> None:
        """Store a JSON-compatible value under the key."""


@dataclass
class InMemoryStore(LocalStore):
    """Non-durable store used for tests and ephemeral sessions."""

    _values: dict[str, object]

    def __init__(self) -> None:
        self._values = {}

    def get(self, key: str, default: object = None) -> object:
        """Return a copy of the stored value."""
        if key not in self._values:
            return default
        return copy.deepcopy(self._values[key])

    def set(self, key: str, value: object) -> None:
        """Store a copy of the value."""
        self._values[key] = copy.deepcopy(value)
