"""
Resumes component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

# --- Validation Errors ---


@dataclass(frozen=True)
class ResumeValidationError:
    """Resume validation error."""

    code: str
    message: str
    field_name: str | None = None


# --- Entities ---


@dataclass(frozen=True)
class Principal:
    """Authenticated caller, taken from a verified bearer token."""

    id: str
    email: str | None = None
    role: str = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


@dataclass(frozen=True)
class Resume:
    """Stored resume, addressed publicly by unique_id."""

    id: UUID
    unique_id: str
    name: str
    resume_data: dict[str, Any]
    created_at: datetime
    updated_at: datetime
    owner_id: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SaveResumeInput:
    """Input for creating a resume."""

    resume_data: Any
    name: str | None = None
    owner: Principal | None = None


@dataclass(frozen=True)
class GetResumeInput:
    """Input for a public fetch."""

    unique_id: str


@dataclass(frozen=True)
class ListResumesInput:
    """Input for listing resumes; owner_id scopes the list when given."""

    owner_id: str | None = None
    limit: int = 50


@dataclass(frozen=True)
class UpdateResumeInput:
    """Input for updating a resume."""

    unique_id: str
    principal: Principal
    name: str | None = None
    resume_data: Any = None


@dataclass(frozen=True)
class DeleteResumeInput:
    """Input for deleting a resume."""

    unique_id: str
    principal: Principal


# --- Output Models ---


@dataclass(frozen=True)
class ResumeOutput:
    """Output from a single-resume operation."""

    resume: Resume | None
    errors: list[ResumeValidationError] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class ResumeListOutput:
    """Output from a listing."""

    items: tuple[Resume, ...]
    errors: list[ResumeValidationError] = field(default_factory=list)
    success: bool = True
