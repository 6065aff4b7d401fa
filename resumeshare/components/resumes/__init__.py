"""
Resumes component - Resume records addressed by share token.
"""

from .component import (
    DEFAULT_LIST_LIMIT,
    DEFAULT_NAME,
    can_modify,
    run_delete,
    run_get,
    run_list,
    run_save,
    run_update,
    validate_resume_data,
)
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
from .ports import ResumeRepoPort, ResumeRulesPort

__all__ = [
    # Entry points
    "run_delete",
    "run_get",
    "run_list",
    "run_save",
    "run_update",
    # Models
    "DeleteResumeInput",
    "GetResumeInput",
    "ListResumesInput",
    "Principal",
    "Resume",
    "ResumeListOutput",
    "ResumeOutput",
    "ResumeValidationError",
    "SaveResumeInput",
    "UpdateResumeInput",
    # Ports
    "ResumeRepoPort",
    "ResumeRulesPort",
    # Helpers
    "DEFAULT_LIST_LIMIT",
    "DEFAULT_NAME",
    "can_modify",
    "validate_resume_data",
]
