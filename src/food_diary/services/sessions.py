"""Diary session lifecycle."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from food_diary.domain.sessions import DiarySession


@dataclass
class SessionService:
    """Creates and tears down per-user diary sessions."""

    clock: Callable[[], datetime]

    def start(self, user_id: str) -> DiarySession:
        """Open a session on today's date."""
        return DiarySession(user_id=user_id, selected_day=self.clock().date())

    def end(self, session: DiarySession) -> None:
        """Sign out: drop the user and any pending input."""
        session.user_id = None
        session.pending_input = ""
