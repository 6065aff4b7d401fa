"""
Resume routes.

Public fetch by share token (which also records a view), creation, listing,
and owner/admin updates and deletes.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status

from resumeshare.adapters.clock import SystemClock
from resumeshare.api.deps import (
    AnalyticsRulesAdapter,
    ResumeRulesAdapter,
    get_analytics_rules,
    get_client_info,
    get_clock,
    get_current_principal,
    get_optional_principal,
    get_resume_repo,
    get_resume_rules,
    get_view_store,
)
from resumeshare.api.errors import api_error
from resumeshare.api.schemas import (
    ResumeListResponse,
    ResumeMessageResponse,
    ResumePreview,
    ResumePreviewResponse,
    SavedResumeData,
    SaveResumeRequest,
    SaveResumeResponse,
    UpdateResumeRequest,
    resume_summary,
)
from resumeshare.components.analytics import (
    ClientInfo,
    PersistenceError,
    TrackViewInput,
    ViewStorePort,
    run_track_quietly,
)
from resumeshare.components.resumes import (
    DeleteResumeInput,
    GetResumeInput,
    ListResumesInput,
    Principal,
    ResumeOutput,
    ResumeRepoPort,
    SaveResumeInput,
    UpdateResumeInput,
    run_delete,
    run_get,
    run_list,
    run_save,
    run_update,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "forbidden": status.HTTP_403_FORBIDDEN,
}


def _raise_for_errors(result: ResumeOutput) -> None:
    if result.success:
        return
    error = result.errors[0]
    raise api_error(_ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST), error.message)


@router.post(
    "/save",
    response_model=SaveResumeResponse,
    response_model_by_alias=True,
    status_code=status.HTTP_201_CREATED,
)
def save_resume(
    body: SaveResumeRequest,
    principal: Principal | None = Depends(get_optional_principal),
    repo: ResumeRepoPort = Depends(get_resume_repo),
    rules: ResumeRulesAdapter = Depends(get_resume_rules),
    clock: SystemClock = Depends(get_clock),
) -> SaveResumeResponse:
    """Create a resume and return its share token."""
    try:
        result = run_save(
            SaveResumeInput(resume_data=body.resume_data, name=body.name, owner=principal),
            repo=repo,
            rules=rules,
            time_port=clock,
        )
    except PersistenceError as e:
        logger.exception("Error saving resume")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save resume", e) from e

    _raise_for_errors(result)
    assert result.resume is not None
    resume = result.resume
    return SaveResumeResponse(
        unique_id=resume.unique_id,
        data=SavedResumeData(id=resume.id, unique_id=resume.unique_id, name=resume.name),
    )


@router.get(
    "/preview/{unique_id}",
    response_model=ResumePreviewResponse,
    response_model_by_alias=True,
)
def preview_resume(
    unique_id: str,
    background_tasks: BackgroundTasks,
    client: ClientInfo = Depends(get_client_info),
    repo: ResumeRepoPort = Depends(get_resume_repo),
    store: ViewStorePort = Depends(get_view_store),
    clock: SystemClock = Depends(get_clock),
    analytics_rules: AnalyticsRulesAdapter = Depends(get_analytics_rules),
) -> ResumePreviewResponse:
    """Public fetch by share token. Records a view after the response is sent."""
    try:
        result = run_get(GetResumeInput(unique_id=unique_id), repo=repo)
    except PersistenceError as e:
        logger.exception("Error fetching resume %s", unique_id)
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to fetch resume", e) from e

    _raise_for_errors(result)
    assert result.resume is not None
    resume = result.resume

    background_tasks.add_task(
        run_track_quietly,
        TrackViewInput(resume_id=unique_id, unique_id=unique_id, client=client),
        store=store,
        time_port=clock,
        rules=analytics_rules,
    )

    return ResumePreviewResponse(
        resume=ResumePreview(
            name=resume.name,
            resume_data=resume.resume_data,
            created_at=resume.created_at,
        )
    )


def _list(
    inp: ListResumesInput, repo: ResumeRepoPort, rules: ResumeRulesAdapter
) -> ResumeListResponse:
    try:
        result = run_list(inp, repo=repo, rules=rules)
    except PersistenceError as e:
        logger.exception("Error listing resumes")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to list resumes", e) from e

    return ResumeListResponse(
        count=len(result.items),
        resumes=[resume_summary(r) for r in result.items],
    )


@router.get("/all", response_model=ResumeListResponse, response_model_by_alias=True)
def list_all_resumes(
    repo: ResumeRepoPort = Depends(get_resume_repo),
    rules: ResumeRulesAdapter = Depends(get_resume_rules),
) -> ResumeListResponse:
    """Latest resumes across all owners."""
    return _list(ListResumesInput(limit=rules.get_list_limit()), repo, rules)


@router.get("/mine", response_model=ResumeListResponse, response_model_by_alias=True)
def list_my_resumes(
    principal: Principal = Depends(get_current_principal),
    repo: ResumeRepoPort = Depends(get_resume_repo),
    rules: ResumeRulesAdapter = Depends(get_resume_rules),
) -> ResumeListResponse:
    """Resumes owned by the caller."""
    return _list(
        ListResumesInput(owner_id=principal.id, limit=rules.get_list_limit()), repo, rules
    )


@router.put(
    "/{unique_id}",
    response_model=ResumeMessageResponse,
    response_model_by_alias=True,
)
def update_resume(
    unique_id: str,
    body: UpdateResumeRequest,
    principal: Principal = Depends(get_current_principal),
    repo: ResumeRepoPort = Depends(get_resume_repo),
    clock: SystemClock = Depends(get_clock),
) -> ResumeMessageResponse:
    try:
        result = run_update(
            UpdateResumeInput(
                unique_id=unique_id,
                principal=principal,
                name=body.name,
                resume_data=body.resume_data,
            ),
            repo=repo,
            time_port=clock,
        )
    except PersistenceError as e:
        logger.exception("Error updating resume %s", unique_id)
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to update resume", e
        ) from e

    _raise_for_errors(result)
    return ResumeMessageResponse(message="Resume updated successfully", unique_id=unique_id)


@router.delete(
    "/{unique_id}",
    response_model=ResumeMessageResponse,
    response_model_by_alias=True,
)
def delete_resume(
    unique_id: str,
    principal: Principal = Depends(get_current_principal),
    repo: ResumeRepoPort = Depends(get_resume_repo),
) -> ResumeMessageResponse:
    try:
        result = run_delete(
            DeleteResumeInput(unique_id=unique_id, principal=principal), repo=repo
        )
    except PersistenceError as e:
        logger.exception("Error deleting resume %s", unique_id)
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete resume", e
        ) from e

    _raise_for_errors(result)
    return ResumeMessageResponse(message="Resume deleted successfully", unique_id=unique_id)
