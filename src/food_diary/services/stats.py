"""Daily aggregation of food log entries."""

from collections.abc import AsyncIterator, Iterable
from dataclasses import dataclass

from food_diary.domain.entries import FoodLogEntry
from food_diary.domain.nutrition import round_half_up
from food_diary.domain.stats import DailySummary, DailyTotals, MacroPercentages
from food_diary.services.log_feed import FoodLogSubscription
from food_diary.services.themes import classify


def entries_for_day(entries: Iterable[FoodLogEntry], day: str) -> list[FoodLogEntry]:
    """Return the day's entries, most recent first."""
    selected = [entry for entry in entries if entry.date == day]
    return sorted(selected, key=lambda entry: entry.timestamp, reverse=True)


def aggregate(entries: Iterable[FoodLogEntry], day: str) -> DailyTotals:
    """Sum calories, macros and water for the day and derive macro shares."""
    cal = p = c = f = w = 0
    food_entries = 0
    for entry in entries:
        if entry.date != day:
            continue
        stats = entry.resolved_stats
        cal += stats.cal
        p += stats.p
        c += stats.c
        f += stats.f
        w += stats.w
        if stats.cal > 0 or stats.p > 0:
            food_entries += 1

    total_mass = p + c + f
    return DailyTotals(
        day=day,
        cal=cal,
        p=p,
        c=c,
        f=f,
        w=w,
        percentages=MacroPercentages(
            p=_percentage(p, total_mass),
            c=_percentage(c, total_mass),
            f=_percentage(f, total_mass),
        ),
        total_mass=total_mass,
        food_entries=food_entries,
    )


def _percentage(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return round_half_up(part / total * 100)


@dataclass
class DailySummaryService:
    """Combines day filtering, aggregation and theme classification."""

    def summarize(self, entries: Iterable[FoodLogEntry], day: str) -> DailySummary:
        """Build the summary for a day from a set of entries."""
        snapshot = list(entries)
        totals = aggregate(snapshot, day)
        return DailySummary(
            day=day,
            entries=entries_for_day(snapshot, day),
            totals=totals,
            theme=classify(totals),
        )

    async def watch(
        self, subscription: FoodLogSubscription, day: str
    ) -> AsyncIterator[DailySummary]:
        """Yield a fresh summary for every snapshot of the subscription."""
        async for snapshot in subscription:
            yield self.summarize(snapshot, day)
