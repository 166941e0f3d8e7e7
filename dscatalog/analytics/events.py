"""Analytics event models.

Every event carries an ISO-8601 timestamp and the optional session fields
filled in by the tracker.  Events are plain Pydantic models so sinks can
serialise them with ``model_dump(mode="json")``.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal, Optional, Union

from pydantic import BaseModel, Field


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class EventBase(BaseModel):
    ts: str = Field(default_factory=_now)
    session_id: Optional[str] = Field(default=None)
    client_name: Optional[str] = Field(default=None)
    client_version: Optional[str] = Field(default=None)


# -- Automatic events (emitted by track_call) --------------------------------


class ToolCallEvent(EventBase):
    event: Literal["tool_call"] = "tool_call"
    tool: str
    duration_ms: float
    success: bool
    response_size_chars: int = 0


class ErrorEvent(EventBase):
    event: Literal["error"] = "error"
    tool: str
    message: str


class SessionStartEvent(EventBase):
    event: Literal["session_start"] = "session_start"


# -- Semantic events (emitted by service operations) -------------------------


class ComponentLookupEvent(EventBase):
    event: Literal["component_lookup"] = "component_lookup"
    component: str
    found: bool


class SearchQueryEvent(EventBase):
    event: Literal["search_query"] = "search_query"
    query: str
    result_count: int
    top_matches: list[str] = Field(default_factory=list)


class ComponentListEvent(EventBase):
    event: Literal["component_list"] = "component_list"
    layer_filter: Optional[int] = None


class SourceDeliveryEvent(EventBase):
    event: Literal["source_delivery"] = "source_delivery"
    component: str
    file_count: int
    total_bytes: int
    dep_count: int
    dep_names: list[str] = Field(default_factory=list)


class TokenAccessEvent(EventBase):
    event: Literal["token_access"] = "token_access"
    category: Optional[str] = None


class ValidationEvent(EventBase):
    event: Literal["validation"] = "validation"
    components_checked: int
    issue_count: int
    error_count: int


class ScaffoldEvent(EventBase):
    event: Literal["scaffold"] = "scaffold"
    project_name: str
    requested: list[str] = Field(default_factory=list)
    component_count: int
    not_found: list[str] = Field(default_factory=list)
    mode: str
    template: Optional[str] = None


AnalyticsEvent = Union[
    ToolCallEvent,
    ErrorEvent,
    SessionStartEvent,
    ComponentLookupEvent,
    SearchQueryEvent,
    ComponentListEvent,
    SourceDeliveryEvent,
    TokenAccessEvent,
    ScaffoldEvent,
    ValidationEvent,
]
