"""
Analytics component - view ingestion, listing and aggregation.

Invariants:
- I1: Every view belongs to exactly one resumeId; the resume is never looked up
- I2: isUniqueView is fixed at write time
- I3: duplicateViews == totalViews - uniqueViews
- I4: The daily series covers the trailing window only, oldest day first
- I5: Unknown resumeIds produce zero counts, not errors
"""

from __future__ import annotations

import logging
import math
from datetime import timedelta

from ._aggregate import DEFAULT_TIMESERIES_DAYS, timeseries_start, to_breakdown
from ._impl import DefaultTimePort, TrackingConfig, ViewTrackingService
from .models import (
    ListViewsInput,
    ListViewsOutput,
    SummaryInput,
    SummaryOutput,
    TrackViewInput,
    TrackViewOutput,
)
from .ports import AnalyticsRulesPort, TimePort, ViewStorePort

logger = logging.getLogger(__name__)


def _build_config(rules: AnalyticsRulesPort | None) -> TrackingConfig:
    """Build tracking config from rules port."""
    if rules is None:
        return TrackingConfig()
    return TrackingConfig(unique_window=timedelta(hours=rules.get_unique_window_hours()))


# --- Component Entry Points ---


def run_track(
    inp: TrackViewInput,
    *,
    store: ViewStorePort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> TrackViewOutput:
    """
    Track a resume view.

    Args:
        inp: Resume identifiers plus client metadata.
        store: View store port.
        time_port: Optional time port.
        rules: Optional rules port for configuration.

    Returns:
        TrackViewOutput with the stored event or validation errors.

    Raises:
        PersistenceError: if the store fails.
    """
    service = ViewTrackingService(
        store=store,
        time_port=time_port,
        config=_build_config(rules),
    )
    event, errors = service.track(inp)

    return TrackViewOutput(event=event, errors=errors, success=not errors)


def run_track_quietly(
    inp: TrackViewInput,
    *,
    store: ViewStorePort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> None:
    """
    Track a view as a side effect of another request.

    Never raises; failures are logged.
    """
    try:
        result = run_track(inp, store=store, time_port=time_port, rules=rules)
    except Exception:
        logger.exception("Background view tracking failed for %s", inp.resume_id)
        return

    if not result.success:
        logger.warning(
            "Background view tracking rejected for %s: %s",
            inp.resume_id,
            "; ".join(e.message for e in result.errors),
        )


def run_list_views(
    inp: ListViewsInput,
    *,
    store: ViewStorePort,
) -> ListViewsOutput:
    """
    List raw view events, newest first.

    totalViews counts the filtered set; uniqueViews is always the unfiltered
    unique count for the resume.
    """
    offset = (inp.page - 1) * inp.limit

    views = store.list_views(
        inp.resume_id,
        unique_only=inp.unique_only,
        offset=offset,
        limit=inp.limit,
    )
    total_views = store.count(inp.resume_id, unique_only=inp.unique_only)
    unique_views = store.count(inp.resume_id, unique_only=True)

    return ListViewsOutput(
        views=tuple(views),
        total_views=total_views,
        unique_views=unique_views,
        total_pages=math.ceil(total_views / inp.limit),
        current_page=inp.page,
        views_per_page=inp.limit,
    )


def run_summary(
    inp: SummaryInput,
    *,
    store: ViewStorePort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> SummaryOutput:
    """
    Aggregate view statistics for one resume.

    Each figure is an independent store query; any failure fails the whole
    summary.
    """
    time_port = time_port or DefaultTimePort()
    days = rules.get_timeseries_days() if rules is not None else DEFAULT_TIMESERIES_DAYS
    since = timeseries_start(time_port.now_utc(), days)

    return SummaryOutput(
        total_views=store.count(inp.resume_id),
        unique_views=store.count(inp.resume_id, unique_only=True),
        devices=to_breakdown(store.group_count(inp.resume_id, "device_type")),
        browsers=to_breakdown(store.group_count(inp.resume_id, "browser_name")),
        operating_systems=to_breakdown(store.group_count(inp.resume_id, "operating_system")),
        views_over_time=tuple(store.daily_counts(inp.resume_id, since)),
    )


def run(
    inp: TrackViewInput | ListViewsInput | SummaryInput,
    *,
    store: ViewStorePort,
    time_port: TimePort | None = None,
    rules: AnalyticsRulesPort | None = None,
) -> TrackViewOutput | ListViewsOutput | SummaryOutput:
    """
    Main entry point for the analytics component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, TrackViewInput):
        return run_track(inp, store=store, time_port=time_port, rules=rules)
    elif isinstance(inp, ListViewsInput):
        return run_list_views(inp, store=store)
    elif isinstance(inp, SummaryInput):
        return run_summary(inp, store=store, time_port=time_port, rules=rules)
    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
