"""
Uploads component - Disk-backed storage for images and resume documents.

Files are written under a generated name (original stem, upload time in
epoch milliseconds, original extension) and described by a metadata record.
"""

from __future__ import annotations

import logging
import mimetypes
from datetime import UTC, datetime
from pathlib import PurePath
from uuid import uuid4

from .models import (
    DeleteUploadInput,
    GetUploadInput,
    Upload,
    UploadContentOutput,
    UploadFileInput,
    UploadOutput,
    UploadValidationError,
)
from .ports import FileStorePort, UploadRepoPort, UploadRulesPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024
DEFAULT_ALLOWED_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".pdf", ".doc", ".docx")


def generate_stored_name(filename: str, now: datetime) -> str:
    """
    Build the on-disk name for an upload.

    Format: {stem}-{epoch_millis}{ext}
    """
    original = PurePath(filename).name
    suffix = PurePath(original).suffix
    stem = original[: -len(suffix)] if suffix else original
    millis = int(now.timestamp() * 1000)
    return f"{stem}-{millis}{suffix}"


def guess_content_type(filename: str, declared: str | None = None) -> str:
    """MIME type from the declared value, else from the extension."""
    if declared and declared != "application/octet-stream":
        return declared
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


# --- Validation Functions ---


def validate_extension(
    filename: str,
    allowed: list[str] | tuple[str, ...],
) -> list[UploadValidationError]:
    """Extension must be in the allowlist (case-insensitive)."""
    suffix = PurePath(filename).suffix.lower()
    if suffix not in {a.lower() for a in allowed}:
        return [
            UploadValidationError(
                code="invalid_extension",
                message=(
                    f"File type '{suffix or filename}' is not allowed. "
                    f"Allowed types: {', '.join(sorted(allowed))}"
                ),
                field_name="image",
            )
        ]
    return []


def validate_size(size: int, max_bytes: int) -> list[UploadValidationError]:
    """Upload must not exceed max_bytes."""
    if size > max_bytes:
        return [
            UploadValidationError(
                code="file_too_large",
                message=f"File size {size} bytes exceeds maximum of {max_bytes} bytes",
                field_name="image",
            )
        ]
    return []


# --- Component Entry Points ---


def run_upload(
    inp: UploadFileInput,
    *,
    repo: UploadRepoPort,
    storage: FileStorePort,
    rules: UploadRulesPort | None = None,
    now: datetime | None = None,
) -> UploadOutput:
    """
    Store an uploaded file and record it.

    Args:
        inp: File bytes, original filename and optional title.
        repo: Upload metadata repository.
        storage: File store rooted at the uploads directory.
        rules: Optional rules port for limits.
        now: Upload time (for testing/determinism).

    Returns:
        UploadOutput with the stored record or validation errors.
    """
    if not inp.data or not inp.filename:
        return UploadOutput(
            upload=None,
            errors=[
                UploadValidationError(
                    code="file_required",
                    message="No file uploaded.",
                    field_name="image",
                )
            ],
            success=False,
        )

    max_bytes = rules.get_max_upload_bytes() if rules is not None else DEFAULT_MAX_UPLOAD_BYTES
    allowed = rules.get_allowed_extensions() if rules is not None else DEFAULT_ALLOWED_EXTENSIONS

    errors = validate_extension(inp.filename, allowed)
    errors.extend(validate_size(len(inp.data), max_bytes))
    if errors:
        return UploadOutput(upload=None, errors=errors, success=False)

    current = now or datetime.now(UTC)
    stored_name = generate_stored_name(inp.filename, current)
    path = storage.save(stored_name, inp.data)

    upload = Upload(
        id=uuid4(),
        filename=stored_name,
        path=path,
        content_type=guess_content_type(stored_name, inp.content_type),
        size_bytes=len(inp.data),
        created_at=current,
        title=inp.title,
    )
    repo.save(upload)

    logger.info("Upload stored: %s (%d bytes)", stored_name, upload.size_bytes)
    return UploadOutput(upload=upload)


def run_get_content(
    inp: GetUploadInput,
    *,
    repo: UploadRepoPort,
    storage: FileStorePort,
) -> UploadContentOutput:
    """Load an upload record and its bytes."""
    upload = repo.get_by_id(inp.upload_id)
    if upload is None:
        return UploadContentOutput(
            upload=None,
            errors=[UploadValidationError(code="not_found", message="Image Not Found")],
            success=False,
        )

    try:
        data = storage.get(upload.path)
    except FileNotFoundError:
        return UploadContentOutput(
            upload=upload,
            errors=[
                UploadValidationError(
                    code="file_missing",
                    message="Image file missing on server disk.",
                )
            ],
            success=False,
        )

    return UploadContentOutput(upload=upload, data=data)


def run_list(*, repo: UploadRepoPort) -> list[Upload]:
    """All uploads, newest first."""
    return repo.list_all()


def run_delete(
    inp: DeleteUploadInput,
    *,
    repo: UploadRepoPort,
    storage: FileStorePort,
) -> UploadOutput:
    """Remove the file (if still on disk) and its record."""
    upload = repo.get_by_id(inp.upload_id)
    if upload is None:
        return UploadOutput(
            upload=None,
            errors=[UploadValidationError(code="not_found", message="Resume not found.")],
            success=False,
        )

    if storage.exists(upload.path):
        storage.delete(upload.path)
    repo.delete(upload.id)

    logger.info("Upload deleted: %s", upload.filename)
    return UploadOutput(upload=upload)
