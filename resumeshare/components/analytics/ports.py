"""
Analytics component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import BreakdownField, DailyCount, ViewEvent


class ViewStorePort(Protocol):
    """
    Append-only store of view events.

    Implementations raise PersistenceError when the backing store fails.
    """

    def insert(self, event: ViewEvent) -> ViewEvent:
        """Persist a new event."""
        ...

    def find_recent(
        self,
        resume_id: str,
        ip_address: str,
        since: datetime,
    ) -> list[ViewEvent]:
        """Events for (resume_id, ip_address) with timestamp >= since."""
        ...

    def list_views(
        self,
        resume_id: str,
        unique_only: bool = False,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ViewEvent]:
        """Events for a resume, newest first."""
        ...

    def count(self, resume_id: str, unique_only: bool = False) -> int:
        """Number of events for a resume."""
        ...

    def group_count(
        self, resume_id: str, field_name: BreakdownField
    ) -> list[tuple[str | None, int]]:
        """(value, count) pairs grouped by one categorical column."""
        ...

    def daily_counts(self, resume_id: str, since: datetime) -> list[DailyCount]:
        """UTC daily counts for events with timestamp >= since, ascending."""
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...


class AnalyticsRulesPort(Protocol):
    """Port for analytics rules configuration."""

    def get_unique_window_hours(self) -> int:
        ...

    def get_timeseries_days(self) -> int:
        ...
