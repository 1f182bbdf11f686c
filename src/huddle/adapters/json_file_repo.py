"""JSON file activity storage adapter."""

import json
import logging
import threading
import uuid
from pathlib import Path

from huddle.core.activities import Event, Series
from huddle.ports.activity_repo import ActivityNotFoundError

logger = logging.getLogger(__name__)


class JsonFileActivityRepository:
    """
    File-based activity storage.

    Implements ActivityRepository protocol. The whole store is one JSON
    document with "events" and "series" lists; every write rewrites it.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def _read(self) -> tuple[dict[str, Event], dict[str, Series]]:
        """Load the document. A missing file is an empty store."""
        if not self.path.exists():
            return {}, {}
        try:
            data = json.loads(self.path.read_text() or "{}")
            events = [Event.from_dict(item) for item in data.get("events", [])]
            series = [Series.from_dict(item) for item in data.get("series", [])]
        except (json.JSONDecodeError, KeyError, ValueError) as e:
            logger.warning(f"Failed to parse {self.path}: {e}")
            raise ValueError(f"Malformed activity file {self.path}: {e}") from e
        return {e.id: e for e in events}, {s.id: s for s in series}

    def _write(self, events: dict[str, Event], series: dict[str, Series]) -> None:
        data = {
            "events": [e.to_dict() for e in events.values()],
            "series": [s.to_dict() for s in series.values()],
        }
        self.path.write_text(json.dumps(data, indent=2))
        logger.debug(f"Wrote {len(events)} events and {len(series)} series to {self.path}")

    def new_id(self) -> str:
        return uuid.uuid4().hex

    def list_events(self) -> list[Event]:
        events, _ = self._read()
        return list(events.values())

    def list_series(self) -> list[Series]:
        _, series = self._read()
        return list(series.values())

    def get_event(self, event_id: str) -> Event:
        events, _ = self._read()
        if event_id not in events:
            raise ActivityNotFoundError("event", event_id)
        return events[event_id]

    def get_series(self, series_id: str) -> Series:
        _, series = self._read()
        if series_id not in series:
            raise ActivityNotFoundError("series", series_id)
        return series[series_id]

    def save_event(self, event: Event) -> None:
        with self._lock:
            events, series = self._read()
            events[event.id] = event
            self._write(events, series)

    def save_series(self, series_item: Series) -> None:
        with self._lock:
            events, series = self._read()
            series[series_item.id] = series_item
            self._write(events, series)

    def delete_event(self, event_id: str) -> None:
        with self._lock:
            events, series = self._read()
            if events.pop(event_id, None) is None:
                raise ActivityNotFoundError("event", event_id)
            self._write(events, series)

    def delete_series(self, series_id: str) -> None:
        with self._lock:
            events, series = self._read()
            if series.pop(series_id, None) is None:
                raise ActivityNotFoundError("series", series_id)
            self._write(events, series)
