"""Pure activity domain model - events, series and their derived values."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum


class EventType(Enum):
    """Category of an event."""

    SPORTS = "SPORTS"
    ACTIVITY = "ACTIVITY"
    SOCIAL = "SOCIAL"

    @property
    def display(self) -> str:
        return self.value.capitalize()


class Visibility(Enum):
    """Who can see an event or series."""

    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"

    @property
    def display(self) -> str:
        return self.value.capitalize()


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime.

    Naive values are taken to already be UTC.
    """
    dt = datetime.fromisoformat(value)
    return to_utc(dt)


def to_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_instant(dt: datetime) -> str:
    return to_utc(dt).isoformat()


@dataclass
class Location:
    """A named geographic point."""

    latitude: float
    longitude: float
    name: str

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        return cls(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            name=data.get("name", ""),
        )


@dataclass
class Event:
    """A single scheduled activity."""

    id: str
    type: EventType
    title: str
    description: str
    start: datetime
    duration: int
    participants: list[str]
    max_participants: int
    visibility: Visibility
    owner_id: str
    location: Location | None = None

    @property
    def end(self) -> datetime:
        """Start plus duration. The end instant itself is already in the past."""
        return self.start + timedelta(minutes=self.duration)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "description": self.description,
            "start": format_instant(self.start),
            "duration": self.duration,
            "participants": list(self.participants),
            "max_participants": self.max_participants,
            "visibility": self.visibility.value,
            "owner_id": self.owner_id,
            "location": self.location.to_dict() if self.location else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create Event from its stored document."""
        location = data.get("location")
        return cls(
            id=data["id"],
            type=EventType(data.get("type", "ACTIVITY")),
            title=data["title"],
            description=data.get("description", ""),
            start=parse_instant(data["start"]),
            duration=int(data["duration"]),
            participants=list(data.get("participants", [])),
            max_participants=int(data["max_participants"]),
            visibility=Visibility(data.get("visibility", "PUBLIC")),
            owner_id=data["owner_id"],
            location=Location.from_dict(location) if location else None,
        )


@dataclass
class Series:
    """
    A run of back-to-back events shared under one title.

    `last_event_end` caches the end of the chronologically last owned event so
    the series can be classified without loading every event. It equals `start`
    while the series owns no events.
    """

    id: str
    title: str
    description: str
    start: datetime
    event_ids: list[str]
    participants: list[str]
    max_participants: int
    visibility: Visibility
    owner_id: str
    last_event_end: datetime | None = None

    def __post_init__(self) -> None:
        if self.last_event_end is None:
            self.last_event_end = self.start

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start": format_instant(self.start),
            "event_ids": list(self.event_ids),
            "participants": list(self.participants),
            "max_participants": self.max_participants,
            "visibility": self.visibility.value,
            "owner_id": self.owner_id,
            "last_event_end": format_instant(self.last_event_end),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Series":
        """Create Series from its stored document."""
        last_end = data.get("last_event_end")
        return cls(
            id=data["id"],
            title=data["title"],
            description=data.get("description", ""),
            start=parse_instant(data["start"]),
            event_ids=list(data.get("event_ids", [])),
            participants=list(data.get("participants", [])),
            max_participants=int(data["max_participants"]),
            visibility=Visibility(data.get("visibility", "PUBLIC")),
            owner_id=data["owner_id"],
            last_event_end=parse_instant(last_end) if last_end else None,
        )


@dataclass
class SeriesWithEvents:
    """A series together with its resolved events, in start order."""

    series: Series
    events: list[Event] = field(default_factory=list)


def participants_count(entity: Event | Series) -> str:
    """Participant count as "current/max"."""
    return f"{len(entity.participants)}/{entity.max_participants}"


def series_events(series: Series, events: list[Event]) -> list[Event]:
    """Events owned by the series, sorted by start."""
    owned = set(series.event_ids)
    return sorted((e for e in events if e.id in owned), key=lambda e: e.start)


def total_duration_minutes(series: Series) -> int:
    """Whole minutes from series start to the cached last event end."""
    end = series.last_event_end or series.start
    return max(0, int((end - series.start).total_seconds() // 60))


def format_duration(minutes: int) -> str:
    """Render minutes as "5h 30min", "5h" or "45min"."""
    hours, rest = divmod(minutes, 60)
    if hours > 0 and rest > 0:
        return f"{hours}h {rest}min"
    if hours > 0:
        return f"{hours}h"
    return f"{rest}min"
