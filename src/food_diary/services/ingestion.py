"""Food entry ingestion: split, estimate and store submitted items."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

from food_diary.domain.entries import FoodLogDraft, FoodLogEntry
from food_diary.domain.sessions import DiarySession
from food_diary.errors import IngestionFailure
from food_diary.services.estimator import NutritionEstimatorService
from food_diary.services.log_feed import FoodLogFeed

_SEPARATORS = re.compile(r"[,\n]")

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestionResult:
    """Outcome of a submission that did not fail."""

    status: str
    entries: list[FoodLogEntry] = field(default_factory=list)
    reason: str | None = None

    @property
    def saved(self) -> bool:
        """Return true when the submission was processed."""
        return self.status == "saved"


def split_descriptions(raw_text: str) -> list[str]:
    """Split a submission on commas and newlines into trimmed items."""
    pieces = (piece.strip() for piece in _SEPARATORS.split(raw_text))
    return [piece for piece in pieces if piece]


@dataclass
class IngestionService:
    """Estimates submitted items one at a time and stores each entry."""

    estimator: NutritionEstimatorService
    feed: FoodLogFeed
    clock: Callable[[], datetime]
    _in_flight: set[str] = field(default_factory=set, init=False)

    def is_in_flight(self, user_id: str) -> bool:
        """Return true while a submission for the user is being processed."""
        return user_id in self._in_flight

    async def ingest(
        self, session: DiarySession, raw_text: str, day: str | None = None
    ) -> IngestionResult:
        """Log every item of ``raw_text`` for the session's user.

        Items are handled in input order. The first failing item stops the
        submission; entries stored before it are kept.
        """
        items = split_descriptions(raw_text)
        if not items:
            return IngestionResult(status="skipped", reason="empty")
        user_id = session.user_id
        if not user_id:
            return IngestionResult(status="skipped", reason="unauthenticated")
        if user_id in self._in_flight:
            _logger.info("Ingestion already in flight", extra={"user_id": user_id})
            return IngestionResult(status="skipped", reason="in_flight")

        target_day = day or session.day_key
        self._in_flight.add(user_id)
        saved: list[FoodLogEntry] = []
        try:
            for item in items:
                try:
                    stats = await self.estimator.estimate(item)
                    now = self.clock()
                    draft = FoodLogDraft(
                        name=item,
                        date=target_day,
                        time=now.strftime("%H:%M"),
                        timestamp=int(now.timestamp() * 1000),
                        stats=stats,
                    )
                    entry = self.feed.insert(user_id, draft)
                except Exception as exc:
                    _logger.exception(
                        "Failed to log item",
                        extra={"user_id": user_id, "item": item},
                    )
                    raise IngestionFailure(item, saved) from exc
                saved.append(entry)
                _logger.info("Logged %s on %s", item, target_day)
        finally:
            self._in_flight.discard(user_id)

        session.pending_input = ""
        return IngestionResult(status="saved", entries=saved)
