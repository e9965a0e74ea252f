"""Supabase repository for food log entries."""

from dataclasses import dataclass

from supabase import Client

from food_diary.domain.entries import FoodLogDraft, FoodLogEntry
from food_diary.domain.nutrition import NutritionEstimate
from food_diary.services.log_feed import FoodLogRepository

_COLUMNS = "id, name, date, time, timestamp, stats"


@dataclass
class SupabaseFoodLogRepository(FoodLogRepository):
    """Supabase implementation scoped to one deployment namespace."""

    client: Client
    namespace: str

    def list_entries(self, user_id: str) -> list[FoodLogEntry]:
        """Return every entry for the user in this namespace."""
        response = (
            self.client.table("food_logs")
            .select(_COLUMNS)
            .eq("namespace", self.namespace)
            .eq("user_id", user_id)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def insert_entry(self, user_id: str, draft: FoodLogDraft) -> str:
        """Insert an entry row and return its id."""
        response = (
            self.client.table("food_logs")
            .insert(
                {
                    "namespace": self.namespace,
                    "user_id": user_id,
                    "name": draft.name,
                    "date": draft.date,
                    "time": draft.time,
                    "timestamp": draft.timestamp,
                    "stats": draft.stats.model_dump(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create food log entry")
        return str(response.data[0]["id"])

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        """Delete an entry row owned by the user."""
        (
            self.client.table("food_logs")
            .delete()
            .eq("namespace", self.namespace)
            .eq("user_id", user_id)
            .eq("id", entry_id)
            .execute()
        )


def _parse_row(row: dict[str, object]) -> FoodLogEntry:
    stats_raw = row.get("stats")
    return FoodLogEntry(
        id=str(row["id"]),
        name=str(row.get("name", "")),
        date=str(row.get("date", "")),
        time=str(row.get("time", "")),
        timestamp=int(row.get("timestamp") or 0),
        stats=(
            NutritionEstimate.model_validate(stats_raw)
            if isinstance(stats_raw, dict)
            else None
        ),
    )
