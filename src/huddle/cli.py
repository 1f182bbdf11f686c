"""Huddle CLI - activity feed and membership."""

import json
import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import click

from .config import Config, load_config
from .core.activities import (
    EventType,
    Series,
    format_duration,
    parse_instant,
    participants_count,
    total_duration_minutes,
)
from .core.feed import Feed, FeedFilter, FeedItem, feed_headings
from .membership import MembershipController
from .ports.activity_repo import ActivityNotFoundError
from .workflows import get_identity, get_repository, load_feed, series_with_events


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """Huddle - organize events and series with friends."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )


def _zone(config: Config) -> ZoneInfo:
    """Display time zone from config; exits on an unknown TIMEZONE."""
    try:
        return ZoneInfo(config.timezone)
    except (ZoneInfoNotFoundError, ValueError):
        click.echo(f"Error: Unknown TIMEZONE in config: {config.timezone}", err=True)
        sys.exit(1)


def _local(dt: datetime, zone: ZoneInfo) -> datetime:
    return dt.astimezone(zone)


def _serialize_item(item: FeedItem) -> dict:
    return {
        "id": item.id,
        "kind": "series" if item.is_series else "event",
        "title": item.title,
        "bucket": item.bucket.value,
        "start": item.start.isoformat(),
        "end": item.end.isoformat(),
        "participants": participants_count(item.activity),
    }


def _show_feed(feed: Feed, config: Config, zone: ZoneInfo, as_json: bool) -> None:
    headings = feed_headings(feed, ongoing=config.ongoing_labels, upcoming=config.upcoming_labels)

    if as_json:
        click.echo(
            json.dumps(
                {
                    "headings": headings,
                    "ongoing": [_serialize_item(i) for i in feed.ongoing],
                    "upcoming": [_serialize_item(i) for i in feed.upcoming],
                },
                indent=2,
            )
        )
        return

    if feed.is_empty():
        click.echo("You have no events yet. Join one, or create your own event.")
        return

    for key, items in (("ongoing", feed.ongoing), ("upcoming", feed.upcoming)):
        if not items:
            continue
        click.echo(headings[key])
        for item in items:
            start = _local(item.start, zone).strftime("%a %d %b %H:%M")
            marker = "[series] " if item.is_series else ""
            click.echo(f"  {start}  {marker}{item.title} ({participants_count(item.activity)})")
        click.echo()


@main.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--now", "now_str", default=None, help="Reference instant (ISO-8601), defaults to now")
@click.option("--mine", is_flag=True, help="Only activities you own")
@click.option("--joined", is_flag=True, help="Only activities you joined")
@click.option("--others", is_flag=True, help="Only activities you are not part of")
@click.option(
    "--type",
    "types",
    multiple=True,
    type=click.Choice([t.value for t in EventType], case_sensitive=False),
    help="Only events of this type (repeatable)",
)
@click.option("--search", "query", default="", help="Filter by title or description")
@click.option("--user", "user_id", default=None, help="Acting user id (overrides config)")
def feed(
    as_json: bool,
    now_str: str | None,
    mine: bool,
    joined: bool,
    others: bool,
    types: tuple[str, ...],
    query: str,
    user_id: str | None,
):
    """Show ongoing and upcoming events and series."""
    config = load_config()
    zone = _zone(config)
    identity = get_identity(config, user_id)

    try:
        now = parse_instant(now_str) if now_str else None
        feed_filter = FeedFilter(
            types={EventType(t.upper()) for t in types},
            mine=mine,
            joined=joined,
            others=others,
        )
        result = load_feed(
            get_repository(config),
            now=now,
            feed_filter=feed_filter,
            user_id=identity.current_user_id(),
            query=query,
        )
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    _show_feed(result, config, zone, as_json)


def _run_membership(action: str, activity_id: str, is_series: bool, user_id: str | None) -> None:
    """Shared join/quit command body."""
    config = load_config()
    user = get_identity(config, user_id).current_user_id()
    if not user:
        click.echo(f"Error: You must be signed in to {action}. Set USER_ID or pass --user.", err=True)
        sys.exit(1)

    repository = get_repository(config)
    controller = MembershipController(repository)
    try:
        entity = repository.get_series(activity_id) if is_series else repository.get_event(activity_id)
        result = getattr(controller, action)(entity, user)
    except (ActivityNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if not result.ok:
        click.echo(result.error.user_message, err=True)
        sys.exit(1)

    verb = "Joined" if action == "join" else "Left"
    click.echo(f"{verb} {result.entity.title} ({participants_count(result.entity)})")


@main.command()
@click.argument("activity_id")
@click.option("--series", "is_series", is_flag=True, help="ACTIVITY_ID names a series")
@click.option("--user", "user_id", default=None, help="Acting user id (overrides config)")
def join(activity_id: str, is_series: bool, user_id: str | None):
    """Join an event or series."""
    _run_membership("join", activity_id, is_series, user_id)


@main.command("quit")
@click.argument("activity_id")
@click.option("--series", "is_series", is_flag=True, help="ACTIVITY_ID names a series")
@click.option("--user", "user_id", default=None, help="Acting user id (overrides config)")
def quit_(activity_id: str, is_series: bool, user_id: str | None):
    """Leave an event or series."""
    _run_membership("quit", activity_id, is_series, user_id)


def _describe_series(series: Series, zone: ZoneInfo) -> str:
    start = _local(series.start, zone).strftime("%d/%m/%Y at %H:%M")
    duration = format_duration(total_duration_minutes(series))
    return (
        f"{series.title}\n"
        f"  {series.description}\n"
        f"  Starts {start}, lasts {duration}\n"
        f"  Participants: {participants_count(series)}  Visibility: {series.visibility.display}"
    )


@main.command("series")
@click.argument("series_id")
def series_cmd(series_id: str):
    """Show a series and its events."""
    config = load_config()
    zone = _zone(config)
    try:
        details = series_with_events(get_repository(config), series_id)
    except (ActivityNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(_describe_series(details.series, zone))
    if not details.events:
        click.echo("\nNo events in this series yet.")
        return

    click.echo("\nEvents:")
    for event in details.events:
        start = _local(event.start, zone).strftime("%a %d %b %H:%M")
        click.echo(f"  {start}  {event.title} ({event.duration}min, {event.type.display})")


if __name__ == "__main__":
    main()
