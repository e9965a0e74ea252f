"""Food log store access with change notification."""

import asyncio
import logging
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Protocol

from food_diary.domain.entries import FoodLogDraft, FoodLogEntry
from food_diary.errors import StoreSyncFailure

Snapshot = tuple[FoodLogEntry, ...]

_logger = logging.getLogger(__name__)


class FoodLogRepository(Protocol):
    """Persistence interface for a user's food log."""

    def list_entries(self, user_id: str) -> list[FoodLogEntry]:
        """Return every entry of the user's log."""

    def insert_entry(self, user_id: str, draft: FoodLogDraft) -> str:
        """Persist an entry and return the store-assigned id."""

    def delete_entry(self, user_id: str, entry_id: str) -> None:
        """Delete an entry from the user's log."""


class FoodLogSubscription:
    """Cancellable stream of immutable log snapshots for one user.

    At most one undelivered item is held. A newer snapshot replaces one the
    consumer has not read yet, so a slow reader always sees the latest state.
    """

    def __init__(self, feed: "FoodLogFeed", user_id: str) -> None:
        self.user_id = user_id
        self._feed = feed
        self._queue: asyncio.Queue[Snapshot | StoreSyncFailure | None] = (
            asyncio.Queue(maxsize=1)
        )
        self._cancelled = False
        self.last_snapshot: Snapshot | None = None

    @property
    def cancelled(self) -> bool:
        """Return true once the subscription was cancelled."""
        return self._cancelled

    def cancel(self) -> None:
        """Stop receiving snapshots."""
        if self._cancelled:
            return
        self._cancelled = True
        self._feed.unsubscribe(self)
        self._discard_pending()
        self._queue.put_nowait(None)

    def push(self, snapshot: Snapshot | StoreSyncFailure) -> None:
        """Queue a snapshot, or a sync failure, for delivery."""
        if self._cancelled:
            return
        self._discard_pending()
        self._queue.put_nowait(snapshot)

    def _discard_pending(self) -> None:
        while not self._queue.empty():
            self._queue.get_nowait()

    def __aiter__(self) -> AsyncIterator[Snapshot]:
        return self

    async def __anext__(self) -> Snapshot:
        if self._cancelled and self._queue.empty():
            raise StopAsyncIteration
        snapshot = await self._queue.get()
        if snapshot is None:
            raise StopAsyncIteration
        if isinstance(snapshot, StoreSyncFailure):
            raise snapshot
        self.last_snapshot = snapshot
        return snapshot


@dataclass
class FoodLogFeed:
    """Wraps the repository and publishes a snapshot after every change."""

    repository: FoodLogRepository
    _subscribers: dict[str, list[FoodLogSubscription]] = field(
        default_factory=dict, init=False
    )

    def snapshot(self, user_id: str) -> Snapshot:
        """Load the current snapshot of the user's log."""
        try:
            return tuple(self.repository.list_entries(user_id))
        except Exception as exc:
            _logger.exception("Food log sync failed", extra={"user_id": user_id})
            raise StoreSyncFailure(user_id) from exc

    def subscribe(self, user_id: str) -> FoodLogSubscription:
        """Subscribe to snapshots, starting with the current one."""
        subscription = FoodLogSubscription(self, user_id)
        subscription.push(self.snapshot(user_id))
        self._subscribers.setdefault(user_id, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: FoodLogSubscription) -> None:
        """Detach a subscription from the feed."""
        subscribers = self._subscribers.get(subscription.user_id, [])
        if subscription in subscribers:
            subscribers.remove(subscription)
        if not subscribers:
            self._subscribers.pop(subscription.user_id, None)

    def insert(self, user_id: str, draft: FoodLogDraft) -> FoodLogEntry:
        """Persist a draft and notify subscribers."""
        entry_id = self.repository.insert_entry(user_id, draft)
        self._publish(user_id)
        return FoodLogEntry.from_draft(entry_id, draft)

    def delete(self, user_id: str, entry_id: str) -> None:
        """Delete an entry and notify subscribers."""
        self.repository.delete_entry(user_id, entry_id)
        self._publish(user_id)

    def _publish(self, user_id: str) -> None:
        subscribers = list(self._subscribers.get(user_id, []))
        if not subscribers:
            return
        try:
            snapshot: Snapshot | StoreSyncFailure = self.snapshot(user_id)
        except StoreSyncFailure as exc:
            snapshot = exc
        for subscription in subscribers:
            subscription.push(snapshot)
