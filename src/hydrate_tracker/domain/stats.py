"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class DailyTotal:
    """Total intake for one calendar day."""

    day: date
    total_ml: int
    percent: int
