"""Domain models for water intake entries."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Entry:
    """A single logged drink."""

    id: str
    timestamp: datetime
    amount: int


@dataclass(frozen=True)
class WaterLogRow:
    """Remote water log row tagged with its owner."""

    user_id: UUID
    amount: int
    logged_at: datetime
