"""Activity repository interface."""

from typing import Protocol

from huddle.core.activities import Event, Series


class ActivityNotFoundError(LookupError):
    """Raised when an event or series id is unknown to the repository."""

    def __init__(self, kind: str, activity_id: str):
        self.kind = kind
        self.activity_id = activity_id
        super().__init__(f"{kind} not found: {activity_id}")


class ActivityRepository(Protocol):
    """Interface for storing events and series in any backend.

    Saves overwrite the stored document with the same id (last write wins).
    """

    def new_id(self) -> str:
        """Generate a fresh identifier for an event or series."""
        ...

    def list_events(self) -> list[Event]:
        ...

    def list_series(self) -> list[Series]:
        ...

    def get_event(self, event_id: str) -> Event:
        """Fetch one event. Raises ActivityNotFoundError if missing."""
        ...

    def get_series(self, series_id: str) -> Series:
        """Fetch one series. Raises ActivityNotFoundError if missing."""
        ...

    def save_event(self, event: Event) -> None:
        ...

    def save_series(self, series: Series) -> None:
        ...

    def delete_event(self, event_id: str) -> None:
        """Delete one event. Raises ActivityNotFoundError if missing."""
        ...

    def delete_series(self, series_id: str) -> None:
        """Delete one series. Raises ActivityNotFoundError if missing."""
        ...
