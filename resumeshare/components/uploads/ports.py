"""
Uploads component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from .models import Upload


class UploadRepoPort(Protocol):
    """Repository interface for upload metadata."""

    def get_by_id(self, upload_id: UUID) -> Upload | None:
        ...

    def save(self, upload: Upload) -> Upload:
        ...

    def list_all(self) -> list[Upload]:
        """Newest first."""
        ...

    def delete(self, upload_id: UUID) -> None:
        ...


class FileStorePort(Protocol):
    def save(self, name: str, data: bytes) -> str:
        """Save bytes and return an identifier/path."""
        ...

    def get(self, path: str) -> bytes:
        """Retrieve bytes by path. Raises FileNotFoundError."""
        ...

    def exists(self, path: str) -> bool: ...

    def delete(self, path: str) -> None: ...


class UploadRulesPort(Protocol):
    """Port for upload rules configuration."""

    def get_max_upload_bytes(self) -> int:
        ...

    def get_allowed_extensions(self) -> list[str]:
        ...
