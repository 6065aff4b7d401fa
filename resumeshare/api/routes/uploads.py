"""
Upload routes.

Multipart image/document upload, streaming by id, listing and deletion.
"""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Response, UploadFile, status

from resumeshare.adapters.clock import SystemClock
from resumeshare.api.deps import (
    UploadRulesAdapter,
    get_clock,
    get_file_store,
    get_upload_repo,
    get_upload_rules,
    require_admin,
)
from resumeshare.api.errors import api_error
from resumeshare.api.schemas import (
    AdminUploadsResponse,
    MessageResponse,
    UploadCreatedResponse,
    UploadListItem,
    upload_list_item,
)
from resumeshare.components.analytics import PersistenceError
from resumeshare.components.resumes import Principal
from resumeshare.components.uploads import (
    DeleteUploadInput,
    FileStorePort,
    GetUploadInput,
    UploadFileInput,
    UploadRepoPort,
    UploadValidationError,
    run_delete,
    run_get_content,
    run_list,
    run_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_STATUS = {
    "not_found": status.HTTP_404_NOT_FOUND,
    "file_missing": status.HTTP_404_NOT_FOUND,
    "file_too_large": status.HTTP_413_CONTENT_TOO_LARGE,
}


def _error_status(error: UploadValidationError) -> int:
    return _ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST)


@router.post(
    "/single",
    response_model=UploadCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def upload_single(
    image: UploadFile | None = File(None),
    title: str | None = Form(None),
    repo: UploadRepoPort = Depends(get_upload_repo),
    storage: FileStorePort = Depends(get_file_store),
    rules: UploadRulesAdapter = Depends(get_upload_rules),
    clock: SystemClock = Depends(get_clock),
) -> UploadCreatedResponse:
    """Store one uploaded file under a generated name."""
    data = image.file.read() if image is not None else None

    try:
        result = run_upload(
            UploadFileInput(
                data=data,
                filename=image.filename if image is not None else None,
                title=title,
                content_type=image.content_type if image is not None else None,
            ),
            repo=repo,
            storage=storage,
            rules=rules,
            now=clock.now_utc(),
        )
    except PersistenceError as e:
        logger.exception("Error saving upload")
        raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to save upload", e) from e

    if not result.success or result.upload is None:
        error = result.errors[0]
        raise api_error(_error_status(error), error.message)

    return UploadCreatedResponse(filename=result.upload.filename, id=result.upload.id)


@router.get("/img/{upload_id}")
def get_image(
    upload_id: UUID,
    repo: UploadRepoPort = Depends(get_upload_repo),
    storage: FileStorePort = Depends(get_file_store),
) -> Response:
    """Stream an uploaded file with its stored content type."""
    result = run_get_content(GetUploadInput(upload_id=upload_id), repo=repo, storage=storage)

    if not result.success or result.upload is None or result.data is None:
        error = result.errors[0]
        raise api_error(_error_status(error), error.message)

    return Response(content=result.data, media_type=result.upload.content_type)


@router.get("/resumes", response_model=list[UploadListItem], response_model_by_alias=True)
def list_uploads(repo: UploadRepoPort = Depends(get_upload_repo)) -> list[UploadListItem]:
    return [upload_list_item(u) for u in run_list(repo=repo)]


@router.delete("/resumes/{upload_id}", response_model=MessageResponse)
def delete_upload(
    upload_id: UUID,
    repo: UploadRepoPort = Depends(get_upload_repo),
    storage: FileStorePort = Depends(get_file_store),
) -> MessageResponse:
    try:
        result = run_delete(DeleteUploadInput(upload_id=upload_id), repo=repo, storage=storage)
    except PersistenceError as e:
        logger.exception("Error deleting upload %s", upload_id)
        raise api_error(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to delete upload", e
        ) from e

    if not result.success:
        error = result.errors[0]
        raise api_error(_error_status(error), error.message)

    return MessageResponse(msg="Resume deleted successfully.")


@router.get(
    "/admin/uploads",
    response_model=AdminUploadsResponse,
    response_model_by_alias=True,
)
def admin_list_uploads(
    admin: Principal = Depends(require_admin),
    repo: UploadRepoPort = Depends(get_upload_repo),
) -> AdminUploadsResponse:
    return AdminUploadsResponse(
        admin=admin.email or admin.id,
        uploads=[upload_list_item(u) for u in run_list(repo=repo)],
    )
