"""Pure series maintenance - scheduling owned events and keeping the cached end."""

from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime, timedelta

from .activities import Event, EventType, Location, Series, series_events
from .timeline import resolve_span


def next_event_start(series: Series, event_lookup: Mapping[str, Event]) -> datetime:
    """Start for a newly appended event: right after the last owned one ends."""
    _, end = resolve_span(series, event_lookup)
    return end


def refresh_last_event_end(series: Series, event_lookup: Mapping[str, Event]) -> Series:
    """Return a copy of the series with last_event_end recomputed from its events."""
    _, end = resolve_span(series, event_lookup)
    return replace(series, last_event_end=end)


def new_series_event(
    series: Series,
    event_id: str,
    event_type: EventType,
    title: str,
    description: str,
    duration: int,
    event_lookup: Mapping[str, Event],
    location: Location | None = None,
) -> Event:
    """
    Build the next event of a series.

    The event starts when the series' last event ends and inherits capacity,
    visibility and owner from the series. Its participant list holds only the
    owner.
    """
    return Event(
        id=event_id,
        type=event_type,
        title=title,
        description=description,
        start=next_event_start(series, event_lookup),
        duration=duration,
        participants=[series.owner_id],
        max_participants=series.max_participants,
        visibility=series.visibility,
        owner_id=series.owner_id,
        location=location,
    )


def attach_event(series: Series, event: Event, event_lookup: Mapping[str, Event]) -> Series:
    """Return a copy of the series owning event, with the cached end updated."""
    if event.id in series.event_ids:
        return series
    lookup = {**event_lookup, event.id: event}
    attached = replace(series, event_ids=[*series.event_ids, event.id])
    return refresh_last_event_end(attached, lookup)


def detach_event(series: Series, event_id: str, event_lookup: Mapping[str, Event]) -> Series:
    """Return a copy of the series without event_id, with the cached end updated."""
    detached = replace(series, event_ids=[i for i in series.event_ids if i != event_id])
    return refresh_last_event_end(detached, event_lookup)


def shift_following_events(series: Series, edited: Event, old_duration: int, events: list[Event]) -> list[Event]:
    """
    Shift the owned events after `edited` by its change in duration.

    `events` is any list holding the series' events; `edited` carries the new
    duration. Returns only the events that moved, as new objects.
    """
    delta = timedelta(minutes=edited.duration - old_duration)
    if not delta:
        return []

    ordered = series_events(series, events)
    index = next((i for i, e in enumerate(ordered) if e.id == edited.id), None)
    if index is None:
        return []
    return [replace(e, start=e.start + delta) for e in ordered[index + 1 :]]


EDITABLE_FIELDS = frozenset({"type", "title", "description", "location", "duration"})


def edit_event(event: Event, **changes) -> Event:
    """
    Return a copy of event with the given editable fields replaced.

    Schedule start, participants, capacity, visibility and owner are not
    editable here: start follows from the series and membership goes through
    the membership controller.

    Raises:
        ValueError: a field outside EDITABLE_FIELDS was given.
    """
    locked = set(changes) - EDITABLE_FIELDS
    if locked:
        raise ValueError(f"Cannot edit {', '.join(sorted(locked))} of event {event.id}")
    return replace(event, **changes)
