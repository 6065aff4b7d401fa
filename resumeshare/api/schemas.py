"""
Request and response models.

Wire names are camelCase; document ids and group keys are exposed as "_id".
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from resumeshare.components.analytics import (
    BreakdownItem,
    DailyCount,
    ListViewsOutput,
    SummaryOutput,
    ViewEvent,
)
from resumeshare.components.resumes import Resume
from resumeshare.components.uploads import Upload


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Errors ---
class ErrorDetail(BaseModel):
    success: bool = False
    message: str
    error: str | None = None


# --- Analytics ---
class TrackViewRequest(CamelModel):
    # Optional here so a missing value is reported as 400, not 422.
    resume_id: str | None = None
    unique_id: str | None = None
    view_duration: float | None = None
    session_id: str | None = None


class TrackViewData(CamelModel):
    view_id: UUID
    resume_id: str
    timestamp: datetime
    is_unique_view: bool


class TrackViewResponse(CamelModel):
    success: bool = True
    message: str = "View tracked successfully"
    data: TrackViewData


class ViewEventResponse(CamelModel):
    id: UUID = Field(alias="_id")
    resume_id: str
    unique_id: str
    ip_address: str
    user_agent: str
    browser_name: str
    browser_version: str
    device_type: str
    operating_system: str
    referrer_url: str | None = None
    view_duration: float
    is_unique_view: bool
    session_id: str
    timestamp: datetime


class PaginationInfo(CamelModel):
    total_views: int
    unique_views: int
    total_pages: int
    current_page: int
    views_per_page: int


class ViewsPage(CamelModel):
    views: list[ViewEventResponse]
    analytics: PaginationInfo


class ViewsListResponse(CamelModel):
    success: bool = True
    data: ViewsPage


class BreakdownItemResponse(CamelModel):
    value: str | None = Field(alias="_id")
    count: int


class DayKey(CamelModel):
    year: int
    month: int
    day: int


class DailyCountResponse(CamelModel):
    key: DayKey = Field(alias="_id")
    count: int


class SummaryCounts(CamelModel):
    total_views: int
    unique_views: int
    duplicate_views: int


class Breakdowns(CamelModel):
    devices: list[BreakdownItemResponse]
    browsers: list[BreakdownItemResponse]
    operating_systems: list[BreakdownItemResponse]


class SummaryData(CamelModel):
    summary: SummaryCounts
    breakdowns: Breakdowns
    views_over_time: list[DailyCountResponse]


class SummaryResponse(CamelModel):
    success: bool = True
    data: SummaryData


def view_to_response(event: ViewEvent) -> ViewEventResponse:
    return ViewEventResponse(
        id=event.id,
        resume_id=event.resume_id,
        unique_id=event.unique_id,
        ip_address=event.ip_address,
        user_agent=event.user_agent,
        browser_name=event.browser_name,
        browser_version=event.browser_version,
        device_type=event.device_type,
        operating_system=event.operating_system,
        referrer_url=event.referrer_url,
        view_duration=event.view_duration,
        is_unique_view=event.is_unique_view,
        session_id=event.session_id,
        timestamp=event.timestamp,
    )


def views_page_to_response(page: ListViewsOutput) -> ViewsListResponse:
    return ViewsListResponse(
        data=ViewsPage(
            views=[view_to_response(v) for v in page.views],
            analytics=PaginationInfo(
                total_views=page.total_views,
                unique_views=page.unique_views,
                total_pages=page.total_pages,
                current_page=page.current_page,
                views_per_page=page.views_per_page,
            ),
        )
    )


def _breakdown(items: tuple[BreakdownItem, ...]) -> list[BreakdownItemResponse]:
    return [BreakdownItemResponse(value=i.value, count=i.count) for i in items]


def _daily(items: tuple[DailyCount, ...]) -> list[DailyCountResponse]:
    return [
        DailyCountResponse(key=DayKey(year=d.year, month=d.month, day=d.day), count=d.count)
        for d in items
    ]


def summary_to_response(summary: SummaryOutput) -> SummaryResponse:
    return SummaryResponse(
        data=SummaryData(
            summary=SummaryCounts(
                total_views=summary.total_views,
                unique_views=summary.unique_views,
                duplicate_views=summary.duplicate_views,
            ),
            breakdowns=Breakdowns(
                devices=_breakdown(summary.devices),
                browsers=_breakdown(summary.browsers),
                operating_systems=_breakdown(summary.operating_systems),
            ),
            views_over_time=_daily(summary.views_over_time),
        )
    )


# --- Resumes ---
class SaveResumeRequest(CamelModel):
    name: str | None = None
    resume_data: Any = None


class UpdateResumeRequest(CamelModel):
    name: str | None = None
    resume_data: Any = None


class SavedResumeData(CamelModel):
    id: UUID
    unique_id: str
    name: str


class SaveResumeResponse(CamelModel):
    success: bool = True
    message: str = "Resume saved successfully"
    unique_id: str
    data: SavedResumeData


class ResumePreview(CamelModel):
    name: str
    resume_data: dict[str, Any]
    created_at: datetime


class ResumePreviewResponse(CamelModel):
    success: bool = True
    resume: ResumePreview


class ResumeSummary(CamelModel):
    unique_id: str
    name: str
    created_at: datetime
    updated_at: datetime


class ResumeListResponse(CamelModel):
    success: bool = True
    count: int
    resumes: list[ResumeSummary]


class ResumeMessageResponse(CamelModel):
    success: bool = True
    message: str
    unique_id: str


def resume_summary(resume: Resume) -> ResumeSummary:
    return ResumeSummary(
        unique_id=resume.unique_id,
        name=resume.name,
        created_at=resume.created_at,
        updated_at=resume.updated_at,
    )


# --- Uploads ---
class UploadCreatedResponse(CamelModel):
    msg: str = "Image Uploaded Successfully"
    filename: str
    id: UUID


class UploadListItem(CamelModel):
    id: UUID = Field(alias="_id")
    title: str | None = None
    filename: str


class AdminUploadsResponse(CamelModel):
    message: str = "Admin access granted"
    admin: str | None = None
    uploads: list[UploadListItem]


class MessageResponse(CamelModel):
    msg: str


def upload_list_item(upload: Upload) -> UploadListItem:
    return UploadListItem(id=upload.id, title=upload.title, filename=upload.filename)
