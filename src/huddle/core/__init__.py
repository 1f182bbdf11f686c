"""Functional core - pure activity logic with no I/O."""

from .activities import Event, EventType, Location, Series, SeriesWithEvents, Visibility
from .timeline import Bucket, DanglingReferenceWarning, classify, resolve_span
from .feed import Feed, FeedFilter, FeedItem, build_feed, feed_headings, plural_label
from .membership import (
    AlreadyMemberError,
    CapacityExceededError,
    MembershipError,
    NotAMemberError,
    OwnerCannotQuitError,
    Role,
    join_entity,
    quit_entity,
    role_of,
)

__all__ = [
    # Activities
    "Event",
    "EventType",
    "Location",
    "Series",
    "SeriesWithEvents",
    "Visibility",
    # Timeline
    "Bucket",
    "DanglingReferenceWarning",
    "classify",
    "resolve_span",
    # Feed
    "Feed",
    "FeedFilter",
    "FeedItem",
    "build_feed",
    "feed_headings",
    "plural_label",
    # Membership
    "AlreadyMemberError",
    "CapacityExceededError",
    "MembershipError",
    "NotAMemberError",
    "OwnerCannotQuitError",
    "Role",
    "join_entity",
    "quit_entity",
    "role_of",
]
