"""Domain models for food log entries."""

from dataclasses import dataclass

from food_diary.domain.nutrition import NutritionEstimate


@dataclass(frozen=True)
class FoodLogDraft:
    """Entry contents before the store assigns an identifier."""

    name: str
    date: str
    time: str
    timestamp: int
    stats: NutritionEstimate


@dataclass(frozen=True)
class FoodLogEntry:
    """Persisted food or beverage entry for one day."""

    id: str
    name: str
    date: str
    time: str
    timestamp: int
    stats: NutritionEstimate | None = None

    @property
    def resolved_stats(self) -> NutritionEstimate:
        """Stats with a missing value treated as all zeros."""
        return self.stats or NutritionEstimate.zero()

    @classmethod
    def from_draft(cls, entry_id: str, draft: FoodLogDraft) -> "FoodLogEntry":
        """Build a persisted entry from a draft and its assigned id."""
        return cls(
            id=entry_id,
            name=draft.name,
            date=draft.date,
            time=draft.time,
            timestamp=draft.timestamp,
            stats=draft.stats,
        )
