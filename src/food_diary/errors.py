"""Exceptions raised by the food diary services."""


class FoodDiaryError(Exception):
    """Base class for recoverable food diary failures."""


class EstimationFailure(FoodDiaryError):
    """The estimation service failed on every attempt."""

    def __init__(self, description: str, attempts: int) -> None:
        super().__init__(
            f"Nutrition estimate for {description!r} failed after {attempts} attempts"
        )
        self.description = description
        self.attempts = attempts


class IngestionFailure(FoodDiaryError):
    """One item of a submission could not be estimated or stored."""

    def __init__(self, item: str, saved: list | None = None) -> None:
        super().__init__(f"Failed to log {item!r}")
        self.item = item
        self.saved = list(saved or [])


class StoreSyncFailure(FoodDiaryError):
    """Loading a log snapshot from the store failed."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Failed to sync food log for user {user_id}")
        self.user_id = user_id


class CopyFailure(FoodDiaryError):
    """Writing entry names to the clipboard failed."""
