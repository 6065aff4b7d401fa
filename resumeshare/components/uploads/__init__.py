"""
Uploads component - Image and resume document storage.
"""

from .component import (
    DEFAULT_ALLOWED_EXTENSIONS,
    DEFAULT_MAX_UPLOAD_BYTES,
    generate_stored_name,
    guess_content_type,
    run_delete,
    run_get_content,
    run_list,
    run_upload,
    validate_extension,
    validate_size,
)
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

__all__ = [
    # Entry points
    "run_delete",
    "run_get_content",
    "run_list",
    "run_upload",
    # Models
    "DeleteUploadInput",
    "GetUploadInput",
    "Upload",
    "UploadContentOutput",
    "UploadFileInput",
    "UploadOutput",
    "UploadValidationError",
    # Ports
    "FileStorePort",
    "UploadRepoPort",
    "UploadRulesPort",
    # Helpers
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DEFAULT_MAX_UPLOAD_BYTES",
    "generate_stored_name",
    "guess_content_type",
    "validate_extension",
    "validate_size",
]
