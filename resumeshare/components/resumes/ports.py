"""
Resumes component port definitions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from .models import Resume


class ResumeRepoPort(Protocol):
    """Repository interface for resume records."""

    def get_by_unique_id(self, unique_id: str) -> Resume | None:
        ...

    def save(self, resume: Resume) -> Resume:
        """Insert or update by id."""
        ...

    def list_recent(self, limit: int = 50, owner_id: str | None = None) -> list[Resume]:
        """Newest first, optionally scoped to one owner."""
        ...

    def delete(self, unique_id: str) -> None:
        ...


class ResumeRulesPort(Protocol):
    """Port for resume rules configuration."""

    def get_default_name(self) -> str:
        ...

    def get_list_limit(self) -> int:
        ...


class TimePort(Protocol):
    """Time provider interface."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
