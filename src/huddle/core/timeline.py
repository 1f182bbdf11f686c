"""Pure temporal classification - no I/O dependencies."""

import logging
import warnings
from collections.abc import Mapping
from datetime import datetime
from enum import Enum

from .activities import Event, Series

logger = logging.getLogger(__name__)


class Bucket(Enum):
    """Where an activity sits relative to now."""

    PAST = "past"
    ONGOING = "ongoing"
    UPCOMING = "upcoming"


class DanglingReferenceWarning(UserWarning):
    """A series references an event that no longer exists."""

    pass


def classify(now: datetime, start: datetime, end: datetime) -> Bucket:
    """
    Classify the half-open window [start, end) against now.

    Pure function - no I/O. A zero-width window is UPCOMING until now reaches
    start, then PAST.
    """
    if now < start:
        return Bucket.UPCOMING
    if now < end:
        return Bucket.ONGOING
    return Bucket.PAST


def event_span(event: Event) -> tuple[datetime, datetime]:
    return event.start, event.end


def resolve_span(series: Series, event_lookup: Mapping[str, Event]) -> tuple[datetime, datetime]:
    """
    Resolve a series' (start, end) span from its owned events.

    Start is the series' own recorded start. End is the latest end among the
    owned events that can still be found; ids missing from the lookup are
    skipped with a DanglingReferenceWarning. With nothing to resolve, the end
    collapses to the start.
    """
    end: datetime | None = None
    for event_id in series.event_ids:
        event = event_lookup.get(event_id)
        if event is None:
            logger.warning(f"Series {series.id} references missing event {event_id}")
            warnings.warn(
                DanglingReferenceWarning(f"series {series.id!r} references missing event {event_id!r}"),
                stacklevel=2,
            )
            continue
        if end is None or event.end > end:
            end = event.end
    return series.start, end if end is not None else series.start


def classify_event(now: datetime, event: Event) -> Bucket:
    start, end = event_span(event)
    return classify(now, start, end)


def classify_series(now: datetime, series: Series, event_lookup: Mapping[str, Event]) -> Bucket:
    start, end = resolve_span(series, event_lookup)
    return classify(now, start, end)
