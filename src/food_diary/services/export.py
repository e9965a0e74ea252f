"""CSV and clipboard exports of a day's entries."""

import csv
import io
from collections.abc import Sequence
from typing import Protocol

from food_diary.domain.entries import FoodLogEntry
from food_diary.errors import CopyFailure

CSV_HEADER = "Name,Time,Date,Calories,Protein,Carbs,Fat,Water"


class Clipboard(Protocol):
    """Interface for a plain-text clipboard."""

    def write_text(self, text: str) -> None:
        """Replace the clipboard contents."""


def export_csv(entries: Sequence[FoodLogEntry]) -> str:
    """Render entries as CSV with quoted text and integer numeric columns."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for entry in entries:
        stats = entry.resolved_stats
        writer.writerow(
            [
                entry.name,
                entry.time,
                entry.date,
                stats.cal,
                stats.p,
                stats.c,
                stats.f,
                stats.w,
            ]
        )
    rows = buffer.getvalue().rstrip("\n")
    if not rows:
        return CSV_HEADER
    return f"{CSV_HEADER}\n{rows}"


def export_filename(app_name: str, day: str) -> str:
    """Return the download filename for a day's export."""
    return f"{app_name}_log_{day}.csv"


def clipboard_text(entries: Sequence[FoodLogEntry]) -> str:
    """Join entry names for pasting elsewhere."""
    return ", ".join(entry.name for entry in entries)


def copy_to_clipboard(entries: Sequence[FoodLogEntry], clipboard: Clipboard) -> bool:
    """Copy entry names to the clipboard; return false when there is nothing."""
    if not entries:
        return False
    try:
        clipboard.write_text(clipboard_text(entries))
    except Exception as exc:
        raise CopyFailure("Failed to copy.") from exc
    return True
