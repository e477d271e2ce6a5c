"""Quick-add presets and reminder times."""

from dataclasses import dataclass

from hydrate_tracker.config import is_valid_reminder_time
from hydrate_tracker.services.state import AppState


@dataclass
class PreferencesService:
    """Service for locally stored user preferences."""

    state: AppState

    def list_presets(self) -> list[int]:
        return list(self.state.presets)

    def add_preset(self, amount: int) -> list[int]:
        """Append a preset amount; non-positive amounts are ignored."""
        if amount > 0:
            self.state.presets.append(amount)
            self.state.save()
        return self.list_presets()

    def remove_preset(self, amount: int) -> list[int]:
        """Remove the first preset with the given amount."""
        if amount in self.state.presets:
            self.state.presets.remove(amount)
            self.state.save()
        return self.list_presets()

    def list_reminders(self) -> list[str]:
        return list(self.state.reminders)

    def add_reminder(self, time: str) -> list[str]:
        """Add a reminder at a 24h ``HH:MM`` time."""
        if not is_valid_reminder_time(time):
            raise ValueError(f"Invalid reminder time: {time!r}")
        self.state.reminders.append(time.strip())
        self.state.save()
        return self.list_reminders()

    def remove_reminder(self, index: int) -> list[str]:
        """Remove a reminder by its position in the list."""
        if not 0 <= index < len(self.state.reminders):
            raise ValueError(f"No reminder at position {index}")
        del self.state.reminders[index]
        self.state.save()
        return self.list_reminders()
