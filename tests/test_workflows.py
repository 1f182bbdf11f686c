"""Tests for the shared workflow layer."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from huddle.adapters.memory_repo import InMemoryActivityRepository
from huddle.config import DATA_FILE, Config
from huddle.core.activities import Event, EventType, Series, Visibility
from huddle.core.feed import FeedFilter
from huddle.ports.activity_repo import ActivityNotFoundError
from huddle.workflows import (
    add_event_to_series,
    delete_series,
    edit_series_event,
    get_identity,
    get_repository,
    load_feed,
    remove_event_from_series,
    series_with_events,
)


def utc(hour: int, minute: int = 0) -> datetime:
    return datetime(2025, 1, 15, hour, minute, tzinfo=timezone.utc)


def make_event(event_id: str, start: datetime, duration: int = 60, owner: str = "owner") -> Event:
    return Event(
        id=event_id,
        type=EventType.SPORTS,
        title=f"Event {event_id}",
        description="",
        start=start,
        duration=duration,
        participants=[owner],
        max_participants=4,
        visibility=Visibility.PUBLIC,
        owner_id=owner,
    )


@pytest.fixture
def repo():
    series = Series(
        id="s1",
        title="Tennis week",
        description="",
        start=utc(10),
        event_ids=["e1", "e2"],
        participants=["owner"],
        max_participants=4,
        visibility=Visibility.PUBLIC,
        owner_id="owner",
        last_event_end=utc(12),
    )
    return InMemoryActivityRepository(
        events=[
            make_event("e1", utc(10)),
            make_event("e2", utc(11)),
            make_event("solo", utc(14), owner="alice"),
        ],
        series=[series],
    )


class TestGetRepository:
    def test_uses_configured_file(self, tmp_path):
        repo = get_repository(Config(data_file=str(tmp_path / "data.json")))
        assert repo.path == tmp_path / "data.json"

    def test_expands_user_path(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        repo = get_repository(Config(data_file="~/huddle/data.json"))
        assert "~" not in str(repo.path)
        assert repo.path == Path.home() / "huddle" / "data.json"

    def test_falls_back_to_default(self, monkeypatch, tmp_path):
        monkeypatch.setattr("huddle.workflows.DATA_FILE", tmp_path / "default.json")
        assert get_repository(Config()).path == tmp_path / "default.json"
        assert DATA_FILE.name == "activities.json"


class TestGetIdentity:
    def test_explicit_user_wins(self):
        assert get_identity(Config(user_id="alice"), "bob").current_user_id() == "bob"

    def test_config_user(self):
        assert get_identity(Config(user_id="alice")).current_user_id() == "alice"

    def test_signed_out(self):
        assert get_identity(Config()).current_user_id() is None


class TestLoadFeed:
    def test_aggregates_repository_contents(self, repo):
        feed = load_feed(repo, now=utc(10, 30))

        assert [i.id for i in feed.ongoing] == ["s1"]
        assert [i.id for i in feed.upcoming] == ["solo"]

    def test_applies_filter(self, repo):
        feed = load_feed(repo, now=utc(10, 30), feed_filter=FeedFilter(mine=True), user_id="alice")

        assert feed.ongoing == []
        assert [i.id for i in feed.upcoming] == ["solo"]

    def test_applies_search(self, repo):
        feed = load_feed(repo, now=utc(10, 30), query="tennis")

        assert [i.id for i in feed.ongoing] == ["s1"]
        assert feed.upcoming == []


class TestSeriesWithEvents:
    def test_returns_owned_events_in_order(self, repo):
        details = series_with_events(repo, "s1")
        assert details.series.id == "s1"
        assert [e.id for e in details.events] == ["e1", "e2"]

    def test_unknown_series(self, repo):
        with pytest.raises(ActivityNotFoundError):
            series_with_events(repo, "nope")


class TestAddEventToSeries:
    def test_appends_after_last_event(self, repo):
        event = add_event_to_series(repo, "s1", EventType.SPORTS, "Doubles", "", 30)

        stored = repo.get_event(event.id)
        series = repo.get_series("s1")
        assert stored.start == utc(12)
        assert series.event_ids == ["e1", "e2", event.id]
        assert series.last_event_end == utc(12, 30)

    def test_new_event_is_not_standalone(self, repo):
        event = add_event_to_series(repo, "s1", EventType.SPORTS, "Doubles", "", 30)

        feed = load_feed(repo, now=utc(9))

        assert event.id not in [i.id for i in feed.upcoming]


class TestEditSeriesEvent:
    def test_duration_change_shifts_and_refreshes(self, repo):
        moved = edit_series_event(repo, "s1", "e1", duration=90)

        assert [e.id for e in moved] == ["e2"]
        assert repo.get_event("e2").start == utc(11, 30)
        assert repo.get_event("e1").duration == 90
        assert repo.get_series("s1").last_event_end == utc(12, 30)

    def test_same_duration_only_saves_event(self, repo):
        assert edit_series_event(repo, "s1", "e2", title="Renamed") == []
        assert repo.get_event("e2").title == "Renamed"
        assert repo.get_event("e2").start == utc(11)

    def test_every_edit_refreshes_cached_end(self, repo):
        stale = repo.get_series("s1")
        stale.last_event_end = utc(23)
        repo.save_series(stale)

        edit_series_event(repo, "s1", "e2", title="Renamed")

        assert repo.get_series("s1").last_event_end == utc(12)

    def test_keeps_participants_capacity_and_owner(self, repo):
        edit_series_event(repo, "s1", "e1", type=EventType.SOCIAL, description="Bring rackets")

        stored = repo.get_event("e1")
        assert stored.type == EventType.SOCIAL
        assert stored.description == "Bring rackets"
        assert stored.participants == ["owner"]
        assert stored.max_participants == 4
        assert stored.owner_id == "owner"

    @pytest.mark.parametrize(
        "changes",
        [
            {"participants": ["owner", "x", "y", "z", "w"]},
            {"max_participants": 1},
            {"owner_id": "mallory"},
            {"start": utc(20)},
        ],
    )
    def test_rejects_locked_fields(self, repo, changes):
        with pytest.raises(ValueError):
            edit_series_event(repo, "s1", "e2", **changes)

        stored = repo.get_event("e2")
        assert stored == make_event("e2", utc(11))
        assert repo.get_series("s1").last_event_end == utc(12)

    def test_rejects_foreign_event(self, repo):
        with pytest.raises(ValueError):
            edit_series_event(repo, "s1", "solo", duration=30)
        assert repo.get_event("solo").duration == 60


class TestRemoveAndDelete:
    def test_remove_event_keeps_event(self, repo):
        remove_event_from_series(repo, "s1", "e2")

        assert repo.get_series("s1").event_ids == ["e1"]
        assert repo.get_series("s1").last_event_end == utc(11)
        assert repo.get_event("e2").id == "e2"

    def test_removed_event_becomes_standalone(self, repo):
        remove_event_from_series(repo, "s1", "e2")

        feed = load_feed(repo, now=utc(10, 30))

        assert "e2" in [i.id for i in feed.upcoming]

    def test_remove_unknown_event(self, repo):
        with pytest.raises(ValueError):
            remove_event_from_series(repo, "s1", "solo")

    def test_delete_series_detaches_events(self, repo):
        detached = delete_series(repo, "s1")

        assert detached == ["e1", "e2"]
        with pytest.raises(ActivityNotFoundError):
            repo.get_series("s1")
        feed = load_feed(repo, now=utc(10, 30))
        assert [i.id for i in feed.ongoing] == ["e1"]
        assert [i.id for i in feed.upcoming] == ["e2", "solo"]
