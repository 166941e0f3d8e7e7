"""Fire-and-forget analytics trackers.

Service operations call :meth:`Tracker.emit` and never wait on, or fail
because of, the sink behind it.  Three implementations are provided:

- :class:`NullTracker` discards events (the default).
- :class:`MemoryTracker` keeps events in a list, for tests and local runs.
- :class:`HttpTracker` buffers events and posts them in batches to a
  collector endpoint with ``httpx``.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional

import httpx

from .events import AnalyticsEvent, ErrorEvent, SessionStartEvent, ToolCallEvent

logger = logging.getLogger(__name__)


class Tracker:
    """Base tracker: stamps session info on events and hands them to ``_record``.

    Subclasses override ``_record``.  Any exception raised there is logged
    and dropped so callers never see it.
    """

    def __init__(self) -> None:
        self.session_id: Optional[str] = None
        self.client_name: Optional[str] = None
        self.client_version: Optional[str] = None

    @property
    def has_session(self) -> bool:
        return self.session_id is not None

    def set_session(
        self,
        session_id: str,
        client_name: Optional[str] = None,
        client_version: Optional[str] = None,
    ) -> None:
        self.session_id = session_id
        self.client_name = client_name
        self.client_version = client_version

    def emit(self, event: AnalyticsEvent) -> None:
        stamped = event.model_copy(
            update={
                "session_id": event.session_id or self.session_id,
                "client_name": event.client_name or self.client_name,
                "client_version": event.client_version or self.client_version,
            }
        )
        try:
            self._record(stamped)
        except Exception as exc:  # sink failures must not reach callers
            logger.debug("Dropped analytics event %s: %s", stamped.event, exc)

    def _record(self, event: AnalyticsEvent) -> None:
        raise NotImplementedError


class NullTracker(Tracker):
    """Discards every event."""

    def _record(self, event: AnalyticsEvent) -> None:
        return None


class MemoryTracker(Tracker):
    """Keeps events in memory, in emission order."""

    def __init__(self) -> None:
        super().__init__()
        self.events: list[AnalyticsEvent] = []

    def _record(self, event: AnalyticsEvent) -> None:
        self.events.append(event)

    def of_type(self, name: str) -> list[AnalyticsEvent]:
        return [e for e in self.events if e.event == name]


class HttpTracker(Tracker):
    """Buffers events and posts them as JSON batches to *url*.

    ``emit`` only appends to a bounded buffer; the transport layer decides
    when to call :meth:`flush`.  When the buffer is full the oldest events
    are dropped.
    """

    def __init__(self, url: str, timeout: float = 5.0, max_buffer: int = 1000) -> None:
        super().__init__()
        self.url = url
        self.timeout = timeout
        self.max_buffer = max_buffer
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()

    def _record(self, event: AnalyticsEvent) -> None:
        with self._lock:
            self._buffer.append(event.model_dump(mode="json"))
            overflow = len(self._buffer) - self.max_buffer
            if overflow > 0:
                del self._buffer[:overflow]

    @property
    def pending(self) -> int:
        return len(self._buffer)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=httpx.Timeout(self.timeout, connect=2.0))

    async def flush(self) -> int:
        """Post buffered events; return how many were delivered.

        Delivery failures are logged and the batch is dropped.
        """
        with self._lock:
            batch, self._buffer = self._buffer, []
        if not batch:
            return 0

        try:
            async with self._client() as client:
                response = await client.post(self.url, json={"events": batch})
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Analytics delivery to %s failed: %s", self.url, exc)
            return 0
        return len(batch)


# ---------------------------------------------------------------------------
# Call tracking
# ---------------------------------------------------------------------------


@dataclass
class TrackedCall:
    """Handle yielded by :func:`track_call`; set ``response_size`` on success."""

    tool: str
    response_size: int = 0


@contextmanager
def track_call(tracker: Tracker, tool: str) -> Iterator[TrackedCall]:
    """Time an operation and emit ``tool_call`` (plus ``error`` on failure).

    The first tracked call on a tracker without a session starts one and
    emits ``session_start``.  Exceptions from the wrapped block are re-raised.
    """
    if not tracker.has_session:
        tracker.set_session(f"session-{uuid.uuid4().hex[:12]}", "unknown", "unknown")
        tracker.emit(SessionStartEvent())

    call = TrackedCall(tool=tool)
    start = time.perf_counter()
    try:
        yield call
    except Exception as exc:
        duration = (time.perf_counter() - start) * 1000.0
        tracker.emit(ToolCallEvent(tool=tool, duration_ms=duration, success=False))
        tracker.emit(ErrorEvent(tool=tool, message=str(exc)))
        raise
    duration = (time.perf_counter() - start) * 1000.0
    tracker.emit(
        ToolCallEvent(
            tool=tool,
            duration_ms=duration,
            success=True,
            response_size_chars=call.response_size,
        )
    )
