"""
ViewTrackingService - view ingestion with unique-view detection.

Handles validation, client metadata derivation and persistence of view
events. Also provides the in-memory store and time provider used in tests
and local development.

Key behaviors:
- resumeId is required; nothing is stored without it
- uniqueId defaults to resumeId
- sessionId defaults to a fresh UUID4 string
- isUniqueView computed once, before the write
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import uuid4

from ._aggregate import daily_series, group_by_field
from ._dedupe import DEFAULT_UNIQUE_WINDOW, is_unique_view, window_start
from ._useragent import parse_user_agent
from .models import (
    AnalyticsValidationError,
    BreakdownField,
    ClientInfo,
    DailyCount,
    TrackViewInput,
    ViewEvent,
)
from .ports import TimePort, ViewStorePort

logger = logging.getLogger(__name__)

FALLBACK_IP = "127.0.0.1"
UNKNOWN_USER_AGENT = "Unknown"


# --- Configuration ---


@dataclass(frozen=True)
class TrackingConfig:
    """View tracking configuration."""

    unique_window: timedelta = DEFAULT_UNIQUE_WINDOW


DEFAULT_CONFIG = TrackingConfig()


# --- Default Implementations ---


class InMemoryViewStore:
    """In-memory view store for testing/dev."""

    def __init__(self) -> None:
        self._events: list[ViewEvent] = []

    def insert(self, event: ViewEvent) -> ViewEvent:
        self._events.append(event)
        return event

    def find_recent(
        self,
        resume_id: str,
        ip_address: str,
        since: datetime,
    ) -> list[ViewEvent]:
        return [
            e
            for e in self._events
            if e.resume_id == resume_id and e.ip_address == ip_address and e.timestamp >= since
        ]

    def list_views(
        self,
        resume_id: str,
        unique_only: bool = False,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ViewEvent]:
        matching = self._matching(resume_id, unique_only)
        matching.sort(key=lambda e: e.timestamp, reverse=True)
        return matching[offset : offset + limit]

    def count(self, resume_id: str, unique_only: bool = False) -> int:
        return len(self._matching(resume_id, unique_only))

    def group_count(
        self, resume_id: str, field_name: BreakdownField
    ) -> list[tuple[str | None, int]]:
        return group_by_field(self._matching(resume_id, False), field_name)

    def daily_counts(self, resume_id: str, since: datetime) -> list[DailyCount]:
        return daily_series(self._matching(resume_id, False), since)

    def get_all(self) -> list[ViewEvent]:
        """Get all stored events (for testing)."""
        return list(self._events)

    def _matching(self, resume_id: str, unique_only: bool) -> list[ViewEvent]:
        return [
            e
            for e in self._events
            if e.resume_id == resume_id and (e.is_unique_view or not unique_only)
        ]


class DefaultTimePort:
    """Default time provider."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        return datetime.now(UTC)


# --- Client Metadata ---


def resolve_client_ip(headers: Mapping[str, str], remote_addr: str | None) -> str:
    """
    Best-effort visitor address.

    First X-Forwarded-For entry, then X-Real-IP, then the socket address,
    then loopback.
    """
    forwarded = headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first

    real_ip = headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return remote_addr or FALLBACK_IP


def client_info_from_headers(headers: Mapping[str, str], remote_addr: str | None) -> ClientInfo:
    """Build ClientInfo from request headers and the connection address."""
    return ClientInfo(
        ip_address=resolve_client_ip(headers, remote_addr),
        user_agent=headers.get("user-agent") or UNKNOWN_USER_AGENT,
        referrer_url=headers.get("referer") or headers.get("referrer"),
    )


# --- Validation Functions ---


def validate_resume_id(resume_id: str | None) -> list[AnalyticsValidationError]:
    """resumeId must be present and non-blank."""
    if resume_id is None or not str(resume_id).strip():
        return [
            AnalyticsValidationError(
                code="resume_id_required",
                message="resumeId is required",
                field_name="resumeId",
            )
        ]
    return []


def validate_view_duration(
    view_duration: float | None,
) -> tuple[float, list[AnalyticsValidationError]]:
    """Default to 0, reject negatives."""
    if view_duration is None:
        return 0, []

    if view_duration < 0:
        return 0, [
            AnalyticsValidationError(
                code="invalid_view_duration",
                message="viewDuration must be zero or positive",
                field_name="viewDuration",
            )
        ]
    return view_duration, []


# --- View Tracking Service ---


class ViewTrackingService:
    """
    View tracking service.

    Validates a tracking request, classifies it and writes one event.
    """

    def __init__(
        self,
        store: ViewStorePort,
        time_port: TimePort | None = None,
        config: TrackingConfig | None = None,
    ) -> None:
        """Initialize service."""
        self._store = store
        self._time = time_port or DefaultTimePort()
        self._config = config or DEFAULT_CONFIG

    def track(
        self, inp: TrackViewInput
    ) -> tuple[ViewEvent | None, list[AnalyticsValidationError]]:
        """
        Track one view.

        Returns:
            Tuple of (event, errors). Event is None if validation fails.

        Raises:
            PersistenceError: if the store lookup or write fails.
        """
        errors = validate_resume_id(inp.resume_id)
        view_duration, duration_errors = validate_view_duration(inp.view_duration)
        errors.extend(duration_errors)

        if errors:
            return None, errors

        resume_id = str(inp.resume_id)
        now = self._time.now_utc()
        client = inp.client
        device = parse_user_agent(client.user_agent)

        recent = self._store.find_recent(
            resume_id,
            client.ip_address,
            since=window_start(now, self._config.unique_window),
        )

        event = ViewEvent(
            id=uuid4(),
            resume_id=resume_id,
            unique_id=inp.unique_id or resume_id,
            ip_address=client.ip_address,
            user_agent=client.user_agent,
            timestamp=now,
            session_id=inp.session_id or str(uuid4()),
            browser_name=device.browser_name,
            browser_version=device.browser_version,
            device_type=device.device_type,
            operating_system=device.operating_system,
            referrer_url=client.referrer_url,
            view_duration=view_duration,
            is_unique_view=is_unique_view(
                resume_id,
                client.ip_address,
                recent,
                now,
                self._config.unique_window,
            ),
        )

        self._store.insert(event)

        logger.info(
            "Resume view tracked: %s from %s (%s)",
            resume_id,
            client.ip_address,
            device.device_type,
        )
        return event, []


# --- Factory ---


def create_view_tracking_service(
    store: ViewStorePort,
    time_port: TimePort | None = None,
    config: TrackingConfig | None = None,
) -> ViewTrackingService:
    """Create a ViewTrackingService."""
    return ViewTrackingService(store=store, time_port=time_port, config=config)
