"""
Resume view analytics routes.

Public endpoints: track a view, list raw views, and the aggregated summary.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Query, status

from resumeshare.adapters.clock import SystemClock
from resumeshare.api.deps import (
    AnalyticsRulesAdapter,
    get_analytics_rules,
    get_client_info,
    get_clock,
    get_view_store,
)
from resumeshare.api.errors import api_error
from resumeshare.api.schemas import (
    SummaryResponse,
    TrackViewData,
    TrackViewRequest,
    TrackViewResponse,
    ViewsListResponse,
    summary_to_response,
    views_page_to_response,
)
from resumeshare.components.analytics import (
    ClientInfo,
    ListViewsInput,
    PersistenceError,
    SummaryInput,
    TrackViewInput,
    ViewStorePort,
    run_list_views,
    run_summary,
    run_track,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/track-view",
    response_model=TrackViewResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def track_view(
    body: TrackViewRequest,
    client: ClientInfo = Depends(get_client_info),
    store: ViewStorePort = Depends(get_view_store),
    clock: SystemClock = Depends(get_clock),
    rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> TrackViewResponse:
    """Record one view of a resume."""
    inp = TrackViewInput(
        resume_id=body.resume_id,
        client=client,
        unique_id=body.unique_id,
        view_duration=body.view_duration,
        session_id=body.session_id,
    )

    try:
        result = run_track(inp, store=store, time_port=clock, rules=rules)
    except PersistenceError as e:
        logger.exception("Failed to track view for %s", body.resume_id)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to track view", e) from e

    if not result.success or result.event is None:
        raise api_error(status.HTTP_400_BAD_REQUEST, result.errors[0].message)

    event = result.event
    return TrackViewResponse(
        data=TrackViewData(
            view_id=event.id,
            resume_id=event.resume_id,
            timestamp=event.timestamp,
            is_unique_view=event.is_unique_view,
        )
    )


@router.get(
    "/views/{resume_id}",
    response_model=ViewsListResponse,
    response_model_by_alias=True,
)
def list_views(
    resume_id: str,
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    unique: bool = False,
    store: ViewStorePort = Depends(get_view_store),
    rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> ViewsListResponse:
    """Paginated raw views for a resume, newest first."""
    page_size = min(limit or rules.get_default_page_size(), rules.get_max_page_size())

    try:
        result = run_list_views(
            ListViewsInput(resume_id=resume_id, page=page, limit=page_size, unique_only=unique),
            store=store,
        )
    except PersistenceError as e:
        logger.exception("Failed to list views for %s", resume_id)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get views", e) from e

    return views_page_to_response(result)


@router.get(
    "/analytics/{resume_id}",
    response_model=SummaryResponse,
    response_model_by_alias=True,
)
def get_analytics(
    resume_id: str,
    store: ViewStorePort = Depends(get_view_store),
    clock: SystemClock = Depends(get_clock),
    rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> SummaryResponse:
    """Aggregated view statistics for a resume."""
    try:
        summary = run_summary(
            SummaryInput(resume_id=resume_id), store=store, time_port=clock, rules=rules
        )
    except PersistenceError as e:
        logger.exception("Failed to build analytics for %s", resume_id)
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to get analytics", e
        ) from e

    return summary_to_response(summary)
