"""Analytics events and fire-and-forget trackers."""

from dscatalog.analytics.events import (
    AnalyticsEvent,
    ComponentListEvent,
    ComponentLookupEvent,
    ErrorEvent,
    ScaffoldEvent,
    SearchQueryEvent,
    SessionStartEvent,
    SourceDeliveryEvent,
    TokenAccessEvent,
    ToolCallEvent,
    ValidationEvent,
)
from dscatalog.analytics.tracker import (
    HttpTracker,
    MemoryTracker,
    NullTracker,
    TrackedCall,
    Tracker,
    track_call,
)

__all__ = [
    "AnalyticsEvent",
    "ComponentListEvent",
    "ComponentLookupEvent",
    "ErrorEvent",
    "HttpTracker",
    "MemoryTracker",
    "NullTracker",
    "ScaffoldEvent",
    "SearchQueryEvent",
    "SessionStartEvent",
    "SourceDeliveryEvent",
    "TokenAccessEvent",
    "ToolCallEvent",
    "TrackedCall",
    "Tracker",
    "ValidationEvent",
    "track_call",
]
