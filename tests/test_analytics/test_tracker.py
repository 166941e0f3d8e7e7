"""Tests for analytics trackers and call tracking.

Covers:
- Session stamping and the session_start event
- tool_call / error events from track_call, with re-raise
- emit never raising, whatever the sink does
- HttpTracker buffering and batched delivery through httpx.MockTransport
"""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import httpx
import pytest

from dscatalog.analytics import (
    ComponentLookupEvent,
    HttpTracker,
    MemoryTracker,
    NullTracker,
    SearchQueryEvent,
    Tracker,
    track_call,
)


pytestmark = pytest.mark.unit


class _ExplodingTracker(Tracker):
    def _record(self, event):
        raise RuntimeError("sink is down")


# ---------------------------------------------------------------------------
# Trackers
# ---------------------------------------------------------------------------


class TestTrackers:
    def test_memory_tracker_records_in_order(self):
        tracker = MemoryTracker()
        tracker.emit(SearchQueryEvent(query="table", result_count=2))
        tracker.emit(ComponentLookupEvent(component="Modal", found=True))
        assert [e.event for e in tracker.events] == ["search_query", "component_lookup"]
        assert len(tracker.of_type("component_lookup")) == 1

    def test_session_fields_are_stamped(self):
        tracker = MemoryTracker()
        tracker.set_session("s-1", "cli", "1.2.3")
        tracker.emit(SearchQueryEvent(query="x", result_count=0))
        event = tracker.events[0]
        assert (event.session_id, event.client_name, event.client_version) == ("s-1", "cli", "1.2.3")

    def test_event_session_fields_win(self):
        tracker = MemoryTracker()
        tracker.set_session("s-1")
        tracker.emit(SearchQueryEvent(query="x", result_count=0, session_id="explicit"))
        assert tracker.events[0].session_id == "explicit"

    def test_null_tracker_discards(self):
        NullTracker().emit(SearchQueryEvent(query="x", result_count=0))

    def test_emit_never_raises(self):
        _ExplodingTracker().emit(SearchQueryEvent(query="x", result_count=0))

    def test_event_timestamps(self):
        event = SearchQueryEvent(query="x", result_count=0)
        assert "T" in event.ts


# ---------------------------------------------------------------------------
# track_call
# ---------------------------------------------------------------------------


class TestTrackCall:
    def test_track_call_success(self):
        tracker = MemoryTracker()
        with track_call(tracker, "search_components") as call:
            call.response_size = 120

        assert [e.event for e in tracker.events] == ["session_start", "tool_call"]
        tool_call = tracker.events[1]
        assert tool_call.tool == "search_components"
        assert tool_call.success is True
        assert tool_call.response_size_chars == 120
        assert tool_call.duration_ms >= 0
        assert tool_call.session_id == tracker.session_id

    def test_session_starts_once(self):
        tracker = MemoryTracker()
        for _ in range(3):
            with track_call(tracker, "get_component"):
                pass
        assert len(tracker.of_type("session_start")) == 1
        assert len(tracker.of_type("tool_call")) == 3

    def test_track_call_failure_reraises(self):
        tracker = MemoryTracker()
        with pytest.raises(KeyError):
            with track_call(tracker, "get_component"):
                raise KeyError("boom")

        tool_call = tracker.of_type("tool_call")[0]
        assert tool_call.success is False
        error = tracker.of_type("error")[0]
        assert error.tool == "get_component"
        assert "boom" in error.message

    def test_track_call_survives_broken_sink(self):
        with track_call(_ExplodingTracker(), "list_components") as call:
            call.response_size = 1


# ---------------------------------------------------------------------------
# HttpTracker
# ---------------------------------------------------------------------------


def _mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestHttpTracker:
    def test_http_tracker_buffers(self):
        tracker = HttpTracker("https://collector.test/events")
        tracker.emit(SearchQueryEvent(query="x", result_count=0))
        assert tracker.pending == 1

    def test_http_tracker_buffer_is_bounded(self):
        tracker = HttpTracker("https://collector.test/events", max_buffer=2)
        for i in range(5):
            tracker.emit(SearchQueryEvent(query=str(i), result_count=0))
        assert tracker.pending == 2
        assert [e["query"] for e in tracker._buffer] == ["3", "4"]

    async def test_flush_posts_batch(self):
        received: list[dict] = []

        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url == "https://collector.test/events"
            received.append(json.loads(request.content))
            return httpx.Response(202)

        tracker = HttpTracker("https://collector.test/events")
        tracker.emit(SearchQueryEvent(query="table", result_count=3))
        tracker.emit(ComponentLookupEvent(component="Modal", found=True))

        with patch.object(tracker, "_client", return_value=_mock_client(handler)):
            delivered = await tracker.flush()

        assert delivered == 2
        assert tracker.pending == 0
        events = received[0]["events"]
        assert [e["event"] for e in events] == ["search_query", "component_lookup"]
        assert events[0]["query"] == "table"

    async def test_flush_empty_buffer_sends_nothing(self):
        tracker = HttpTracker("https://collector.test/events")
        with patch.object(tracker, "_client") as client:
            assert await tracker.flush() == 0
        client.assert_not_called()

    async def test_flush_failure_is_logged_and_dropped(self, caplog: pytest.LogCaptureFixture):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(503)

        tracker = HttpTracker("https://collector.test/events")
        tracker.emit(SearchQueryEvent(query="x", result_count=0))

        with caplog.at_level(logging.WARNING, logger="dscatalog.analytics.tracker"):
            with patch.object(tracker, "_client", return_value=_mock_client(handler)):
                delivered = await tracker.flush()

        assert delivered == 0
        assert tracker.pending == 0
        assert "Analytics delivery" in caplog.text

    async def test_flush_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        tracker = HttpTracker("https://collector.test/events")
        tracker.emit(SearchQueryEvent(query="x", result_count=0))
        with patch.object(tracker, "_client", return_value=_mock_client(handler)):
            assert await tracker.flush() == 0
