"""
View aggregation helpers.

Grouped counts over an in-process sequence of view events. The SQLite
adapter computes the same results with GROUP BY; these functions back the
in-memory store and define the expected semantics.

Key behaviors:
- Breakdowns group by one categorical column, order unspecified
- Daily series buckets by UTC calendar day, ascending
- Events before the cutoff are excluded from the series
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from .models import BreakdownField, BreakdownItem, DailyCount, ViewEvent

DEFAULT_TIMESERIES_DAYS = 30

BREAKDOWN_FIELDS: frozenset[str] = frozenset({"device_type", "browser_name", "operating_system"})


def timeseries_start(now: datetime, days: int = DEFAULT_TIMESERIES_DAYS) -> datetime:
    """Earliest timestamp included in the daily series."""
    return now - timedelta(days=days)


def group_by_field(
    events: Iterable[ViewEvent],
    field_name: BreakdownField,
) -> list[tuple[str | None, int]]:
    """Count events per distinct value of field_name."""
    if field_name not in BREAKDOWN_FIELDS:
        raise ValueError(f"Cannot group views by '{field_name}'")

    counts: Counter[str | None] = Counter(getattr(e, field_name) for e in events)
    return list(counts.items())


def daily_series(events: Iterable[ViewEvent], since: datetime) -> list[DailyCount]:
    """Count events per UTC day for timestamps >= since, oldest day first."""
    counts: Counter[tuple[int, int, int]] = Counter()
    for event in events:
        if event.timestamp < since:
            continue
        ts = event.timestamp.astimezone(UTC)
        counts[(ts.year, ts.month, ts.day)] += 1

    return [
        DailyCount(year=y, month=m, day=d, count=n)
        for (y, m, d), n in sorted(counts.items())
    ]


def to_breakdown(pairs: Iterable[tuple[str | None, int]]) -> tuple[BreakdownItem, ...]:
    """Convert (value, count) pairs into output items."""
    return tuple(BreakdownItem(value=value, count=count) for value, count in pairs)
