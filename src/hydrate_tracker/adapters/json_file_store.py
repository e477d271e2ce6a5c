"""File-backed local store."""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from hydrate_tracker.services.cache import LocalStore

logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(LocalStore):
    """Keeps every key in a single JSON document on disk."""

    path: Path
    _values: dict[str, object] | None = field(default=None, init=False, repr=False)

    def get(self, key: str, default: object = None) -> object:
        """Return the stored value or the default when missing."""
        values = self._load()
        if key not in values:
            return default
        return json.loads(json.dumps(values[key]))

    def set(self, key: str, value: object) -> None:
        """Store the value and flush the document to disk."""
        values = self._load()
        values[key] = json.loads(json.dumps(value))
        self._flush(values)

    def _load(self) -> dict[str, object]:
        if self._values is None:
            if self.path.exists():
                self._values = self._read()
            else:
                self._values = {}
        return self._values

    def _read(self) -> dict[str, object]:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except ValueError:
            logger.warning("Cache file %s is unreadable, starting empty", self.path)
            return {}
        return raw if isinstance(raw, dict) else {}

    def _flush(self, values: dict[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(values, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self.path)
