"""
Analytics component input/output models.

ViewEvent is the single record type of the event store. Inputs and outputs
are frozen dataclasses; errors are returned, not raised, except for
PersistenceError which adapters raise when the store fails.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal
from uuid import UUID

# --- Errors ---


@dataclass(frozen=True)
class AnalyticsValidationError:
    """Analytics validation error."""

    code: str
    message: str
    field_name: str | None = None


class PersistenceError(RuntimeError):
    """Raised by store adapters when a read or write fails."""


# --- Enums ---


DeviceType = Literal["desktop", "mobile", "tablet", "unknown"]
BreakdownField = Literal["device_type", "browser_name", "operating_system"]


# --- Client Metadata ---


@dataclass(frozen=True)
class ClientInfo:
    """Request metadata supplied by the HTTP layer."""

    ip_address: str
    user_agent: str
    referrer_url: str | None = None


@dataclass(frozen=True)
class DeviceInfo:
    """Classification derived from a user agent string."""

    browser_name: str = "Unknown"
    browser_version: str = ""
    device_type: DeviceType = "unknown"
    operating_system: str = "Unknown"


# --- View Event ---


@dataclass(frozen=True)
class ViewEvent:
    """One logged resume page view."""

    id: UUID
    resume_id: str
    unique_id: str
    ip_address: str
    user_agent: str
    timestamp: datetime
    session_id: str
    browser_name: str = "Unknown"
    browser_version: str = ""
    device_type: DeviceType = "unknown"
    operating_system: str = "Unknown"
    referrer_url: str | None = None
    view_duration: float = 0
    is_unique_view: bool = True


# --- Input Models ---


@dataclass(frozen=True)
class TrackViewInput:
    """Input for tracking one view."""

    resume_id: str | None
    client: ClientInfo
    unique_id: str | None = None
    view_duration: float | None = None
    session_id: str | None = None


@dataclass(frozen=True)
class ListViewsInput:
    """Input for the paginated raw listing."""

    resume_id: str
    page: int = 1
    limit: int = 50
    unique_only: bool = False


@dataclass(frozen=True)
class SummaryInput:
    """Input for the aggregated summary."""

    resume_id: str


# --- Output Models ---


@dataclass(frozen=True)
class TrackViewOutput:
    """Output for a tracking attempt."""

    event: ViewEvent | None
    errors: list[AnalyticsValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ListViewsOutput:
    """One page of raw events plus counts."""

    views: tuple[ViewEvent, ...]
    total_views: int
    unique_views: int
    total_pages: int
    current_page: int
    views_per_page: int


@dataclass(frozen=True)
class BreakdownItem:
    """Count of events sharing one categorical value."""

    value: str | None
    count: int


@dataclass(frozen=True)
class DailyCount:
    """Number of events on one UTC calendar day."""

    year: int
    month: int
    day: int
    count: int


@dataclass(frozen=True)
class SummaryOutput:
    """Aggregated view statistics for one resume."""

    total_views: int
    unique_views: int
    devices: tuple[BreakdownItem, ...]
    browsers: tuple[BreakdownItem, ...]
    operating_systems: tuple[BreakdownItem, ...]
    views_over_time: tuple[DailyCount, ...]

    @property
    def duplicate_views(self) -> int:
        return self.total_views - self.unique_views
