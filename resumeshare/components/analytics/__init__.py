"""
Analytics component - Resume view ingestion and aggregation.
"""

from ._aggregate import (
    DEFAULT_TIMESERIES_DAYS,
    daily_series,
    group_by_field,
    timeseries_start,
)
from ._dedupe import DEFAULT_UNIQUE_WINDOW, is_unique_view, window_start
from ._impl import (
    DefaultTimePort,
    InMemoryViewStore,
    TrackingConfig,
    ViewTrackingService,
    client_info_from_headers,
    create_view_tracking_service,
    resolve_client_ip,
    validate_resume_id,
    validate_view_duration,
)
from ._useragent import parse_user_agent
from .component import (
    run,
    run_list_views,
    run_summary,
    run_track,
    run_track_quietly,
)
from .models import (
    AnalyticsValidationError,
    BreakdownField,
    BreakdownItem,
    ClientInfo,
    DailyCount,
    DeviceInfo,
    ListViewsInput,
    ListViewsOutput,
    PersistenceError,
    SummaryInput,
    SummaryOutput,
    TrackViewInput,
    TrackViewOutput,
    ViewEvent,
)
from .ports import AnalyticsRulesPort, TimePort, ViewStorePort

__all__ = [
    # Entry points
    "run",
    "run_list_views",
    "run_summary",
    "run_track",
    "run_track_quietly",
    # Input models
    "ClientInfo",
    "ListViewsInput",
    "SummaryInput",
    "TrackViewInput",
    # Output models
    "AnalyticsValidationError",
    "BreakdownField",
    "BreakdownItem",
    "DailyCount",
    "DeviceInfo",
    "ListViewsOutput",
    "PersistenceError",
    "SummaryOutput",
    "TrackViewOutput",
    "ViewEvent",
    # Ports
    "AnalyticsRulesPort",
    "TimePort",
    "ViewStorePort",
    # Service and helpers
    "DEFAULT_TIMESERIES_DAYS",
    "DEFAULT_UNIQUE_WINDOW",
    "DefaultTimePort",
    "InMemoryViewStore",
    "TrackingConfig",
    "ViewTrackingService",
    "client_info_from_headers",
    "create_view_tracking_service",
    "daily_series",
    "group_by_field",
    "is_unique_view",
    "parse_user_agent",
    "resolve_client_ip",
    "timeseries_start",
    "validate_resume_id",
    "validate_view_duration",
    "window_start",
]
