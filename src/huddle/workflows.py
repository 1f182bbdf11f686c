"""Shared workflow layer between the CLI and any other front end.

Each function loads what it needs from a repository, runs the pure core, and
saves the result.
"""

import logging
from datetime import datetime, timezone
from pathlib import Path

from .adapters.json_file_repo import JsonFileActivityRepository
from .adapters.static_identity import StaticIdentity
from .config import DATA_FILE, Config
from .core.activities import Event, EventType, Location, SeriesWithEvents, series_events
from .core.feed import Feed, FeedFilter, build_feed, filter_activities, search_feed
from .core.series import (
    attach_event,
    detach_event,
    edit_event,
    new_series_event,
    refresh_last_event_end,
    shift_following_events,
)
from .ports.activity_repo import ActivityRepository

logger = logging.getLogger(__name__)


def get_repository(config: Config) -> JsonFileActivityRepository:
    """Resolve the activity data file from config."""
    if config.data_file:
        return JsonFileActivityRepository(Path(config.data_file).expanduser())
    return JsonFileActivityRepository(DATA_FILE)


def get_identity(config: Config, user_id: str | None = None) -> StaticIdentity:
    """Explicit user id wins over the configured one."""
    return StaticIdentity(user_id or config.user_id)


def load_feed(
    repository: ActivityRepository,
    now: datetime | None = None,
    feed_filter: FeedFilter | None = None,
    user_id: str | None = None,
    query: str = "",
) -> Feed:
    """Fetch everything, narrow it, and aggregate the ongoing/upcoming feed."""
    now = now or datetime.now(timezone.utc)
    events = repository.list_events()
    series = repository.list_series()
    logger.debug(f"Building feed at {now.isoformat()} from {len(events)} events and {len(series)} series")

    if feed_filter is not None:
        events, series = filter_activities(events, series, feed_filter, user_id)

    feed = build_feed(now, events, series)
    if query:
        feed = search_feed(feed, query)
    return feed


def series_with_events(repository: ActivityRepository, series_id: str) -> SeriesWithEvents:
    series = repository.get_series(series_id)
    return SeriesWithEvents(series=series, events=series_events(series, repository.list_events()))


def add_event_to_series(
    repository: ActivityRepository,
    series_id: str,
    event_type: EventType,
    title: str,
    description: str,
    duration: int,
    location: Location | None = None,
) -> Event:
    """Append a new event right after the series' last one and save both."""
    series = repository.get_series(series_id)
    lookup = {e.id: e for e in repository.list_events()}

    event = new_series_event(
        series,
        repository.new_id(),
        event_type,
        title,
        description,
        duration,
        lookup,
        location=location,
    )
    repository.save_event(event)
    repository.save_series(attach_event(series, event, lookup))
    logger.info(f"Added event {event.id} to series {series_id} starting {event.start.isoformat()}")
    return event


def edit_series_event(repository: ActivityRepository, series_id: str, event_id: str, **changes) -> list[Event]:
    """
    Apply editable field changes to a series event and keep the series gap-free.

    Only type, title, description, location and duration can change; the
    stored participants, capacity and owner are kept. When the duration
    changed, every later event moves by the difference. The cached series end
    is recomputed and saved after every edit. Returns the events that moved.
    """
    series = repository.get_series(series_id)
    if event_id not in series.event_ids:
        raise ValueError(f"Event {event_id} is not part of series {series_id}")
    previous = repository.get_event(event_id)
    edited = edit_event(previous, **changes)
    repository.save_event(edited)

    events = {e.id: e for e in repository.list_events()}
    moved = shift_following_events(series, edited, previous.duration, list(events.values()))
    for event in moved:
        repository.save_event(event)
        events[event.id] = event

    repository.save_series(refresh_last_event_end(series, events))
    if moved:
        logger.info(f"Shifted {len(moved)} events in series {series_id}")
    return moved


def remove_event_from_series(repository: ActivityRepository, series_id: str, event_id: str) -> None:
    """Detach an event from its series. The event itself is kept."""
    series = repository.get_series(series_id)
    if event_id not in series.event_ids:
        raise ValueError(f"Event {event_id} is not part of series {series_id}")
    lookup = {e.id: e for e in repository.list_events()}
    repository.save_series(detach_event(series, event_id, lookup))


def delete_series(repository: ActivityRepository, series_id: str) -> list[str]:
    """
    Delete a series and leave its events behind as standalone events.

    Returns the ids of the detached events that still exist.
    """
    series = repository.get_series(series_id)
    repository.delete_series(series_id)
    existing = {e.id for e in repository.list_events()}
    detached = [i for i in series.event_ids if i in existing]
    logger.info(f"Deleted series {series_id}, detached {len(detached)} events")
    return detached
