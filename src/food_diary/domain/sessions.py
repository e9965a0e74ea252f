"""Domain models for diary sessions."""

from dataclasses import dataclass
from datetime import date, timedelta


@dataclass
class DiarySession:
    """Per-user context for the selected day and pending input."""

    user_id: str | None
    selected_day: date
    pending_input: str = ""

    @property
    def is_authenticated(self) -> bool:
        """Return true when a user is attached to the session."""
        return bool(self.user_id)

    @property
    def day_key(self) -> str:
        """Selected day as a YYYY-MM-DD key."""
        return day_key(self.selected_day)

    def shift_day(self, offset: int) -> date:
        """Move the selected day by whole days and return it."""
        self.selected_day = adjacent_day(self.selected_day, offset)
        return self.selected_day


def adjacent_day(value: date, offset: int) -> date:
    """Return the date ``offset`` whole days away."""
    return value + timedelta(days=offset)


def day_key(value: date) -> str:
    """Format a date as a day key."""
    return value.isoformat()


def parse_day_key(raw: str) -> date:
    """Parse a YYYY-MM-DD day key."""
    parts = raw.split("-")
    if len(parts) != 3 or [len(part) for part in parts] != [4, 2, 2]:  # noqa: PLR2004
        raise ValueError(f"Invalid day key: {raw!r}")
    return date.fromisoformat(raw)


def display_date(value: date) -> str:
    """Human readable label, e.g. 'Wednesday, Dec 25'."""
    return f"{value.strftime('%A')}, {value.strftime('%b')} {value.day}"
