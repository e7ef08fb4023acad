"""Unit tests for the visitor analytics tracker."""

import json

import pytest
from services.analytics_service.tracker import (
    ENGAGEMENT_KEY,
    LAST_SESSION_KEY,
    MAX_ENGAGEMENT_EVENTS,
    MAX_PAGE_VIEWS,
    PAGE_VIEWS_KEY,
    SESSIONS_KEY,
    STORAGE_KEYS,
    AnalyticsTracker,
)

MINUTE = 60 * 1000
START = 1_700_000_000_000


class FakeClock:
    def __init__(self, now: int = START):
        self.now = now

    def advance(self, ms: int) -> None:
        self.now += ms

    def __call__(self) -> int:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return AnalyticsTracker(store={}, clock=clock)


@pytest.mark.unit
class TestPageViews:
    def test_records_path_and_optional_fields(self, tracker):
        tracker.track_page_view("/programs", referrer="https://google.com", user_agent="UA")
        tracker.track_page_view("/events")

        views = json.loads(tracker.store[PAGE_VIEWS_KEY])
        assert views[0] == {
            "path": "/programs",
            "timestamp": START,
            "referrer": "https://google.com",
            "userAgent": "UA",
        }
        assert views[1] == {"path": "/events", "timestamp": START}

    def test_keeps_only_most_recent_views(self, tracker, clock):
        for i in range(MAX_PAGE_VIEWS + 5):
            clock.advance(1)
            tracker.track_page_view(f"/page/{i}")

        views = json.loads(tracker.store[PAGE_VIEWS_KEY])
        assert len(views) == MAX_PAGE_VIEWS
        assert views[0]["path"] == "/page/5"
        assert views[-1]["path"] == f"/page/{MAX_PAGE_VIEWS + 4}"

    def test_visitor_counted_once(self, tracker):
        visitor = tracker.visitor_id()
        tracker.track_page_view("/")
        tracker.track_page_view("/about")

        assert visitor.startswith("visitor_")
        assert tracker.visitor_id() == visitor
        assert tracker.summary()["uniqueVisitorCount"] == 1


@pytest.mark.unit
class TestSessions:
    def test_views_within_window_share_a_session(self, tracker, clock):
        tracker.track_page_view("/")
        clock.advance(10 * MINUTE)
        tracker.track_page_view("/programs")

        session = json.loads(tracker.store[LAST_SESSION_KEY])
        assert session["startTime"] == START
        assert session["pageViews"] == 2
        assert json.loads(tracker.store[SESSIONS_KEY]) == []

    def test_window_is_measured_from_session_start(self, tracker, clock):
        tracker.track_page_view("/")
        clock.advance(20 * MINUTE)
        tracker.track_page_view("/a")
        clock.advance(20 * MINUTE)  # 40 minutes after the session started
        tracker.track_page_view("/b")

        closed = json.loads(tracker.store[SESSIONS_KEY])
        assert len(closed) == 1
        assert closed[0]["startTime"] == START
        assert closed[0]["endTime"] == START + 40 * MINUTE
        assert closed[0]["pageViews"] == 2

        current = json.loads(tracker.store[LAST_SESSION_KEY])
        assert current == {"startTime": START + 40 * MINUTE, "pageViews": 1, "path": "/b"}


@pytest.mark.unit
class TestEngagement:
    def test_records_event(self, tracker):
        tracker.track_engagement("button_click", "enroll-now", "/programs")
        events = json.loads(tracker.store[ENGAGEMENT_KEY])
        assert events == [
            {
                "type": "button_click",
                "target": "enroll-now",
                "timestamp": START,
                "path": "/programs",
            }
        ]

    def test_keeps_only_most_recent_events(self, tracker):
        for i in range(MAX_ENGAGEMENT_EVENTS + 3):
            tracker.track_engagement("link_click", f"link-{i}", "/")
        events = json.loads(tracker.store[ENGAGEMENT_KEY])
        assert len(events) == MAX_ENGAGEMENT_EVENTS
        assert events[0]["target"] == "link-3"


@pytest.mark.unit
class TestSummary:
    def test_empty_store(self, tracker):
        summary = tracker.summary()
        assert summary["totalPageViews"] == 0
        assert summary["totalSessions"] == 0
        assert summary["avgSessionTime"] == 0
        assert summary["engagementRate"] == 0.0
        assert summary["pageViewStats"] == []
        assert summary["recentPageViews"] == []

    def test_aggregates(self, tracker, clock):
        tracker.track_page_view("/")
        clock.advance(10 * MINUTE)
        tracker.track_page_view("/programs")
        tracker.track_engagement("button_click", "enroll-now", "/programs")
        tracker.track_engagement("form_open", "contact", "/programs")
        tracker.track_engagement("button_click", "enroll-now", "/")
        clock.advance(30 * MINUTE)
        tracker.track_page_view("/programs")
        tracker.track_page_view("/events")
        clock.advance(20 * MINUTE)

        summary = tracker.summary()

        assert summary["totalPageViews"] == 4
        assert summary["totalEngagement"] == 3
        # One closed 40 minute session plus the open one, 20 minutes old
        assert summary["totalSessions"] == 2
        assert summary["avgSessionTime"] == 30
        assert summary["engagementRate"] == 75.0
        assert summary["pageViewStats"][0] == {"path": "/programs", "count": 2}
        assert summary["buttonStats"] == [{"button": "enroll-now", "count": 2}]
        assert summary["recentPageViews"][0]["path"] == "/events"
        assert summary["recentEngagement"][0]["target"] == "enroll-now"

    def test_top_pages_capped_at_ten(self, tracker):
        for i in range(12):
            tracker.track_page_view(f"/page/{i}")
        assert len(tracker.summary()["pageViewStats"]) == 10


@pytest.mark.unit
def test_clear_removes_every_key(tracker):
    tracker.track_page_view("/")
    tracker.track_engagement("button_click", "x", "/")
    tracker.store["unrelated"] = "keep"

    tracker.clear()

    assert not any(key in tracker.store for key in STORAGE_KEYS)
    assert tracker.store["unrelated"] == "keep"


@pytest.mark.unit
def test_unreadable_value_is_treated_as_empty(tracker):
    tracker.store[PAGE_VIEWS_KEY] = "{not json"
    tracker.track_page_view("/")
    assert len(json.loads(tracker.store[PAGE_VIEWS_KEY])) == 1
