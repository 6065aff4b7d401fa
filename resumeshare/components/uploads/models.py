"""
Uploads component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

# --- Validation Errors ---


@dataclass(frozen=True)
class UploadValidationError:
    """Upload validation error."""

    code: str
    message: str
    field_name: str | None = None


# --- Entities ---


@dataclass(frozen=True)
class Upload:
    """Stored image or resume document."""

    id: UUID
    filename: str
    path: str
    content_type: str
    size_bytes: int
    created_at: datetime
    title: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class UploadFileInput:
    """Input for storing an uploaded file."""

    data: bytes | None
    filename: str | None
    title: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class GetUploadInput:
    """Input for fetching an upload."""

    upload_id: UUID


@dataclass(frozen=True)
class DeleteUploadInput:
    """Input for deleting an upload."""

    upload_id: UUID


# --- Output Models ---


@dataclass(frozen=True)
class UploadOutput:
    """Output from a single-upload operation."""

    upload: Upload | None
    errors: list[UploadValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class UploadContentOutput:
    """Upload metadata together with its bytes."""

    upload: Upload | None
    data: bytes | None = None
    errors: list[UploadValidationError] = field(default_factory=list)
    success: bool = True
