"""Pure feed aggregation logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime

from .activities import Event, EventType, Series
from .membership import Role, role_of
from .timeline import Bucket, classify, event_span, resolve_span

ONGOING_LABELS = ("Your ongoing activity :", "Your ongoing activities :")
UPCOMING_LABELS = ("Your upcoming activity :", "Your upcoming activities :")


@dataclass
class FeedItem:
    """An event or series annotated with its bucket. Never persisted."""

    activity: Event | Series
    bucket: Bucket
    start: datetime
    end: datetime

    @property
    def id(self) -> str:
        return self.activity.id

    @property
    def title(self) -> str:
        return self.activity.title

    @property
    def description(self) -> str:
        return self.activity.description

    @property
    def is_series(self) -> bool:
        return isinstance(self.activity, Series)

    def sort_key(self) -> tuple[datetime, str, bool]:
        return (self.start, self.id, self.is_series)


@dataclass
class Feed:
    """Ongoing and upcoming feed items, each in start order."""

    ongoing: list[FeedItem] = field(default_factory=list)
    upcoming: list[FeedItem] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.ongoing and not self.upcoming


@dataclass
class FeedFilter:
    """
    Optional narrowing applied before aggregation.

    An empty type set keeps every type. With no participation flag set, or no
    user to compare against, every activity is kept.
    """

    types: set[EventType] = field(default_factory=set)
    mine: bool = False
    joined: bool = False
    others: bool = False

    def is_empty(self) -> bool:
        return not self.types and not (self.mine or self.joined or self.others)


def owned_event_ids(series: list[Series]) -> set[str]:
    """Union of every series' owned event ids."""
    return {event_id for s in series for event_id in s.event_ids}


def standalone_events(events: list[Event], series: list[Series]) -> list[Event]:
    """Events not owned by any series."""
    owned = owned_event_ids(series)
    return [e for e in events if e.id not in owned]


def build_feed(now: datetime, events: list[Event], series: list[Series]) -> Feed:
    """
    Merge standalone events and series into one classified feed.

    Pure function - no I/O. Events owned by a series only contribute to that
    series' span and never show up on their own. PAST items are dropped. Each
    bucket is sorted by start, then id.
    """
    lookup = {e.id: e for e in events}
    feed = Feed()

    activities: list[Event | Series] = [*standalone_events(events, series), *series]
    for activity in activities:
        if isinstance(activity, Series):
            start, end = resolve_span(activity, lookup)
        else:
            start, end = event_span(activity)

        bucket = classify(now, start, end)
        item = FeedItem(activity=activity, bucket=bucket, start=start, end=end)
        if bucket is Bucket.ONGOING:
            feed.ongoing.append(item)
        elif bucket is Bucket.UPCOMING:
            feed.upcoming.append(item)

    feed.ongoing.sort(key=FeedItem.sort_key)
    feed.upcoming.sort(key=FeedItem.sort_key)
    return feed


def plural_label(count: int, singular: str, plural: str) -> str:
    return singular if count == 1 else plural


def feed_headings(
    feed: Feed,
    ongoing: tuple[str, str] = ONGOING_LABELS,
    upcoming: tuple[str, str] = UPCOMING_LABELS,
) -> dict[str, str]:
    """
    Section headings for the non-empty buckets of a feed.

    Returns dict with keys among: ongoing, upcoming
    """
    headings = {}
    if feed.ongoing:
        headings["ongoing"] = plural_label(len(feed.ongoing), *ongoing)
    if feed.upcoming:
        headings["upcoming"] = plural_label(len(feed.upcoming), *upcoming)
    return headings


def _matches_participation(activity: Event | Series, flt: FeedFilter, user_id: str | None) -> bool:
    if not (flt.mine or flt.joined or flt.others) or not user_id:
        return True
    role = role_of(activity, user_id)
    return (
        (flt.mine and role is Role.OWNER)
        or (flt.joined and role is Role.MEMBER)
        or (flt.others and role is Role.NON_MEMBER)
    )


def _series_matches_types(series: Series, lookup: dict[str, Event], types: set[EventType]) -> bool:
    owned = [lookup[i] for i in series.event_ids if i in lookup]
    if not owned:
        return True
    return any(e.type in types for e in owned)


def filter_activities(
    events: list[Event],
    series: list[Series],
    flt: FeedFilter,
    user_id: str | None = None,
) -> tuple[list[Event], list[Series]]:
    """
    Apply a FeedFilter to feed inputs.

    Owned events are kept exactly when their series is kept, so dropping a
    series never promotes its events to standalone items.

    Returns: (events, series)
    """
    if flt.is_empty():
        return events, series

    lookup = {e.id: e for e in events}

    kept_series = [
        s
        for s in series
        if _matches_participation(s, flt, user_id)
        and (not flt.types or _series_matches_types(s, lookup, flt.types))
    ]

    owned = owned_event_ids(series)
    owned_by_kept = owned_event_ids(kept_series)
    kept_events = []
    for e in events:
        if e.id in owned:
            if e.id in owned_by_kept:
                kept_events.append(e)
        elif (not flt.types or e.type in flt.types) and _matches_participation(e, flt, user_id):
            kept_events.append(e)

    return kept_events, kept_series


def search_items(items: list[FeedItem], query: str) -> list[FeedItem]:
    """Keep items whose title or description contains query, ignoring case."""
    needle = query.strip().lower()
    if not needle:
        return list(items)
    return [i for i in items if needle in i.title.lower() or needle in i.description.lower()]


def search_feed(feed: Feed, query: str) -> Feed:
    return Feed(ongoing=search_items(feed.ongoing, query), upcoming=search_items(feed.upcoming, query))
