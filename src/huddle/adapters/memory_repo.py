"""In-memory activity storage adapter."""

import copy
import itertools
import logging

from huddle.core.activities import Event, Series
from huddle.ports.activity_repo import ActivityNotFoundError

logger = logging.getLogger(__name__)


class InMemoryActivityRepository:
    """
    Process-local activity storage.

    Implements ActivityRepository protocol. Nothing is persisted; stored values
    are copied on the way in and out so callers never share state with the store.
    """

    def __init__(self, events: list[Event] | None = None, series: list[Series] | None = None):
        self._events: dict[str, Event] = {}
        self._series: dict[str, Series] = {}
        self._counter = itertools.count()
        for event in events or []:
            self.save_event(event)
        for s in series or []:
            self.save_series(s)

    def new_id(self) -> str:
        return str(next(self._counter))

    def list_events(self) -> list[Event]:
        return [copy.deepcopy(e) for e in self._events.values()]

    def list_series(self) -> list[Series]:
        return [copy.deepcopy(s) for s in self._series.values()]

    def get_event(self, event_id: str) -> Event:
        try:
            return copy.deepcopy(self._events[event_id])
        except KeyError:
            raise ActivityNotFoundError("event", event_id) from None

    def get_series(self, series_id: str) -> Series:
        try:
            return copy.deepcopy(self._series[series_id])
        except KeyError:
            raise ActivityNotFoundError("series", series_id) from None

    def save_event(self, event: Event) -> None:
        logger.debug(f"Saving event {event.id}")
        self._events[event.id] = copy.deepcopy(event)

    def save_series(self, series: Series) -> None:
        logger.debug(f"Saving series {series.id}")
        self._series[series.id] = copy.deepcopy(series)

    def delete_event(self, event_id: str) -> None:
        if self._events.pop(event_id, None) is None:
            raise ActivityNotFoundError("event", event_id)

    def delete_series(self, series_id: str) -> None:
        if self._series.pop(series_id, None) is None:
            raise ActivityNotFoundError("series", series_id)
