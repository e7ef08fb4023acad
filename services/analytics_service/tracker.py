"""
Visitor analytics: page views, engagement events and sessions.

State lives in a string key/value store (a plain dict, or a
``JsonFileStore``) as JSON documents, one per key. Nothing is shared
between stores. Timestamps are epoch milliseconds.
"""

import json
import secrets
import time
from collections import Counter
from collections.abc import MutableMapping
from typing import Any, Callable, Literal, Optional

from libs.common.logging import get_logger

logger = get_logger(__name__)

PAGE_VIEWS_KEY = "vortex_page_views"
ENGAGEMENT_KEY = "vortex_engagement"
SESSIONS_KEY = "vortex_sessions"
UNIQUE_VISITORS_KEY = "vortex_unique_visitors"
LAST_SESSION_KEY = "vortex_last_session"
VISITOR_ID_KEY = "vortex_visitor_id"

STORAGE_KEYS = (
    PAGE_VIEWS_KEY,
    ENGAGEMENT_KEY,
    SESSIONS_KEY,
    UNIQUE_VISITORS_KEY,
    LAST_SESSION_KEY,
    VISITOR_ID_KEY,
)

MAX_PAGE_VIEWS = 1000
MAX_ENGAGEMENT_EVENTS = 500
MAX_SESSIONS = 100
SESSION_TIMEOUT_MS = 30 * 60 * 1000
TOP_N = 10
RECENT_N = 20

EngagementType = Literal["page_view", "button_click", "form_open", "link_click"]


def _system_clock_ms() -> int:
    return int(time.time() * 1000)


class AnalyticsTracker:
    def __init__(
        self,
        store: Optional[MutableMapping] = None,
        clock: Callable[[], int] = _system_clock_ms,
    ):
        self.store = store if store is not None else {}
        self.clock = clock

    # --- storage helpers ---

    def _get(self, key: str, default: Any = None) -> Any:
        raw = self.store.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Discarding unreadable analytics value for %s", key)
            return default

    def _set(self, key: str, value: Any) -> None:
        self.store[key] = json.dumps(value)

    # --- tracking ---

    def visitor_id(self) -> str:
        """Return this store's visitor id, creating it on first use."""
        visitor_id = self.store.get(VISITOR_ID_KEY)
        if not visitor_id:
            visitor_id = f"visitor_{self.clock()}_{secrets.token_hex(5)[:9]}"
            self.store[VISITOR_ID_KEY] = visitor_id
        return visitor_id

    def track_page_view(
        self,
        path: str,
        referrer: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        now = self.clock()
        page_view = {"path": path, "timestamp": now}
        if referrer:
            page_view["referrer"] = referrer
        if user_agent:
            page_view["userAgent"] = user_agent

        views = self._get(PAGE_VIEWS_KEY, [])
        views.append(page_view)
        self._set(PAGE_VIEWS_KEY, views[-MAX_PAGE_VIEWS:])

        self._track_unique_visitor()
        self._track_session(path, now)

    def track_engagement(self, type: EngagementType, target: str, path: str) -> None:
        events = self._get(ENGAGEMENT_KEY, [])
        events.append(
            {"type": type, "target": target, "timestamp": self.clock(), "path": path}
        )
        self._set(ENGAGEMENT_KEY, events[-MAX_ENGAGEMENT_EVENTS:])

    def _track_unique_visitor(self) -> None:
        visitor_id = self.visitor_id()
        visitors = self._get(UNIQUE_VISITORS_KEY, [])
        if visitor_id not in visitors:
            visitors.append(visitor_id)
            self._set(UNIQUE_VISITORS_KEY, visitors)

    def _track_session(self, path: str, now: int) -> None:
        # The 30 minute window is measured from the session's start
        last_session = self._get(LAST_SESSION_KEY)
        if last_session is None or now - last_session["startTime"] > SESSION_TIMEOUT_MS:
            sessions = self._get(SESSIONS_KEY, [])
            if last_session is not None and not last_session.get("endTime"):
                last_session["endTime"] = now
                sessions.append(last_session)
            self._set(LAST_SESSION_KEY, {"startTime": now, "pageViews": 1, "path": path})
            self._set(SESSIONS_KEY, sessions[-MAX_SESSIONS:])
        else:
            last_session["pageViews"] += 1
            self._set(LAST_SESSION_KEY, last_session)

    # --- reporting ---

    def summary(self) -> dict[str, Any]:
        """Aggregate counts for the admin analytics page."""
        now = self.clock()
        views = self._get(PAGE_VIEWS_KEY, [])
        events = self._get(ENGAGEMENT_KEY, [])
        sessions = list(self._get(SESSIONS_KEY, []))
        last_session = self._get(LAST_SESSION_KEY)
        if last_session is not None:
            sessions.append(last_session)
        visitors = self._get(UNIQUE_VISITORS_KEY, [])

        total_ms = sum(
            (s.get("endTime") or now) - s["startTime"] for s in sessions
        )
        avg_session_minutes = (
            round(total_ms / len(sessions) / 1000 / 60) if sessions else 0
        )
        engagement_rate = (
            round(len(events) / len(views) * 100, 1) if views else 0.0
        )

        page_counts = Counter(view["path"] for view in views)
        button_counts = Counter(
            event["target"] for event in events if event["type"] == "button_click"
        )

        return {
            "totalPageViews": len(views),
            "totalEngagement": len(events),
            "totalSessions": len(sessions),
            "uniqueVisitorCount": len(visitors),
            "avgSessionTime": avg_session_minutes,
            "engagementRate": engagement_rate,
            "pageViewStats": [
                {"path": path, "count": count}
                for path, count in page_counts.most_common(TOP_N)
            ],
            "buttonStats": [
                {"button": button, "count": count}
                for button, count in button_counts.most_common(TOP_N)
            ],
            "recentPageViews": list(reversed(views[-RECENT_N:])),
            "recentEngagement": list(reversed(events[-RECENT_N:])),
        }

    def clear(self) -> None:
        for key in STORAGE_KEYS:
            self.store.pop(key, None)
