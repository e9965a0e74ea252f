"""Domain models for daily statistics."""

from dataclasses import dataclass

from food_diary.domain.entries import FoodLogEntry
from food_diary.domain.themes import Theme


@dataclass(frozen=True)
class MacroPercentages:
    """Share of protein, carbs and fat in the day's macro mass."""

    p: int
    c: int
    f: int


@dataclass(frozen=True)
class DailyTotals:
    """Daily totals for calories, macros and water."""

    day: str
    cal: int
    p: int
    c: int
    f: int
    w: int
    percentages: MacroPercentages
    total_mass: int
    food_entries: int


@dataclass(frozen=True)
class DailySummary:
    """Entries, totals and theme for the selected day."""

    day: str
    entries: list[FoodLogEntry]
    totals: DailyTotals
    theme: Theme
