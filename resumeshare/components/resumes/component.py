"""
Resumes component - Resume record CRUD.

Resumes are addressed by an opaque uniqueId share token. Writes can be tied
to an owner; updates and deletes are limited to the owner or an admin.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime
from typing import Any
from uuid import uuid4

from .models import (
    DeleteResumeInput,
    GetResumeInput,
    ListResumesInput,
    Principal,
    Resume,
    ResumeListOutput,
    ResumeOutput,
    ResumeValidationError,
    SaveResumeInput,
    UpdateResumeInput,
)
from .ports import ResumeRepoPort, ResumeRulesPort, TimePort

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Untitled Resume"
DEFAULT_LIST_LIMIT = 50


def _now(time_port: TimePort | None) -> datetime:
    return time_port.now_utc() if time_port is not None else datetime.now(UTC)


def _fail(code: str, message: str, field_name: str | None = None) -> ResumeOutput:
    return ResumeOutput(
        resume=None,
        errors=[ResumeValidationError(code=code, message=message, field_name=field_name)],
        success=False,
    )


def validate_resume_data(resume_data: Any) -> list[ResumeValidationError]:
    """resumeData is required and must be a JSON object."""
    if resume_data is None:
        return [
            ResumeValidationError(
                code="resume_data_required",
                message="Resume data is required",
                field_name="resumeData",
            )
        ]
    if not isinstance(resume_data, dict):
        return [
            ResumeValidationError(
                code="invalid_resume_data",
                message="Resume data must be an object",
                field_name="resumeData",
            )
        ]
    return []


def can_modify(resume: Resume, principal: Principal) -> bool:
    """Owners and admins may change a resume."""
    if principal.is_admin:
        return True
    return resume.owner_id is not None and resume.owner_id == principal.id


# --- Component Entry Points ---


def run_save(
    inp: SaveResumeInput,
    *,
    repo: ResumeRepoPort,
    rules: ResumeRulesPort | None = None,
    time_port: TimePort | None = None,
) -> ResumeOutput:
    """Create a resume with a fresh uniqueId."""
    errors = validate_resume_data(inp.resume_data)
    if errors:
        return ResumeOutput(resume=None, errors=errors, success=False)

    default_name = rules.get_default_name() if rules is not None else DEFAULT_NAME
    now = _now(time_port)

    resume = Resume(
        id=uuid4(),
        unique_id=str(uuid4()),
        name=inp.name or default_name,
        resume_data=inp.resume_data,
        created_at=now,
        updated_at=now,
        owner_id=inp.owner.id if inp.owner else None,
    )
    repo.save(resume)

    logger.info("Resume saved: %s (owner=%s)", resume.unique_id, resume.owner_id)
    return ResumeOutput(resume=resume)


def run_get(inp: GetResumeInput, *, repo: ResumeRepoPort) -> ResumeOutput:
    """Fetch a resume by uniqueId."""
    resume = repo.get_by_unique_id(inp.unique_id)
    if resume is None:
        return _fail("not_found", "Resume not found", "uniqueId")
    return ResumeOutput(resume=resume)


def run_list(
    inp: ListResumesInput,
    *,
    repo: ResumeRepoPort,
    rules: ResumeRulesPort | None = None,
) -> ResumeListOutput:
    """List resumes newest first."""
    limit = inp.limit
    if rules is not None:
        limit = min(limit, rules.get_list_limit())

    items = repo.list_recent(limit=limit, owner_id=inp.owner_id)
    return ResumeListOutput(items=tuple(items))


def run_update(
    inp: UpdateResumeInput,
    *,
    repo: ResumeRepoPort,
    time_port: TimePort | None = None,
) -> ResumeOutput:
    """Update name and/or data of a resume the caller may modify."""
    resume = repo.get_by_unique_id(inp.unique_id)
    if resume is None:
        return _fail("not_found", "Resume not found", "uniqueId")

    if not can_modify(resume, inp.principal):
        return _fail("forbidden", "Not allowed to modify this resume")

    updates: dict[str, Any] = {}
    if inp.name is not None:
        updates["name"] = inp.name
    if inp.resume_data is not None:
        errors = validate_resume_data(inp.resume_data)
        if errors:
            return ResumeOutput(resume=None, errors=errors, success=False)
        updates["resume_data"] = inp.resume_data

    updated = replace(resume, updated_at=_now(time_port), **updates)
    repo.save(updated)

    logger.info("Resume updated: %s by %s", updated.unique_id, inp.principal.id)
    return ResumeOutput(resume=updated)


def run_delete(inp: DeleteResumeInput, *, repo: ResumeRepoPort) -> ResumeOutput:
    """
    Delete a resume the caller may modify.

    View events recorded for it are left in place.
    """
    resume = repo.get_by_unique_id(inp.unique_id)
    if resume is None:
        return _fail("not_found", "Resume not found", "uniqueId")

    if not can_modify(resume, inp.principal):
        return _fail("forbidden", "Not allowed to delete this resume")

    repo.delete(inp.unique_id)

    logger.info("Resume deleted: %s by %s", inp.unique_id, inp.principal.id)
    return ResumeOutput(resume=resume)
