"""
SQLite repositories for view events, resumes and uploads.

Each call opens its own connection unless one is injected. sqlite3 errors
are re-raised as PersistenceError so callers see a single failure type.

Timestamps are stored as fixed-width UTC ISO-8601 strings with microseconds,
so string comparison and ORDER BY follow chronological order.
"""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any
from uuid import UUID

from resumeshare.components.analytics import (
    BreakdownField,
    DailyCount,
    PersistenceError,
    ViewEvent,
)
from resumeshare.components.resumes import Resume
from resumeshare.components.uploads import Upload

# -----------------------------------------------------------------------------
# Helper functions
# -----------------------------------------------------------------------------


def dict_factory(cursor: sqlite3.Cursor, row: tuple[Any, ...]) -> dict[str, Any]:
    """Convert SQLite row to dictionary."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


def format_dt(dt: datetime) -> str:
    """Fixed-width UTC ISO string."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="microseconds")


def parse_dt(s: str) -> datetime:
    """Parse ISO datetime string."""
    dt = datetime.fromisoformat(s)
    return dt if dt.tzinfo is not None else dt.replace(tzinfo=UTC)


# Columns a breakdown may group by; anything else never reaches SQL.
_BREAKDOWN_COLUMNS: dict[str, str] = {
    "device_type": "device_type",
    "browser_name": "browser_name",
    "operating_system": "operating_system",
}


# -----------------------------------------------------------------------------
# Base SQLite Repository
# -----------------------------------------------------------------------------


class SQLiteRepoBase:
    """Base class for SQLite repositories."""

    def __init__(self, db_path: str, connection: sqlite3.Connection | None = None):
        self.db_path = db_path
        self._external_conn = connection

    def _get_conn(self) -> sqlite3.Connection:
        """Get database connection (uses external if provided)."""
        if self._external_conn is not None:
            return self._external_conn

        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        return conn

    def _should_close(self) -> bool:
        """Whether to close connection after use."""
        return self._external_conn is None

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection, commit on success, wrap sqlite errors."""
        try:
            conn = self._get_conn()
        except sqlite3.Error as e:
            raise PersistenceError(f"Cannot open database {self.db_path}: {e}") from e

        try:
            yield conn
            if self._should_close():
                conn.commit()
        except sqlite3.Error as e:
            raise PersistenceError(str(e)) from e
        finally:
            if self._should_close():
                conn.close()


# -----------------------------------------------------------------------------
# View events
# -----------------------------------------------------------------------------


class SQLiteViewStore(SQLiteRepoBase):
    """SQLite implementation of ViewStorePort."""

    def insert(self, event: ViewEvent) -> ViewEvent:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO views (
                    id, resume_id, unique_id, ip_address, user_agent,
                    browser_name, browser_version, device_type, operating_system,
                    referrer_url, view_duration, is_unique_view, session_id, timestamp
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(event.id),
                    event.resume_id,
                    event.unique_id,
                    event.ip_address,
                    event.user_agent,
                    event.browser_name,
                    event.browser_version,
                    event.device_type,
                    event.operating_system,
                    event.referrer_url,
                    event.view_duration,
                    1 if event.is_unique_view else 0,
                    event.session_id,
                    format_dt(event.timestamp),
                ),
            )
        return event

    def find_recent(
        self,
        resume_id: str,
        ip_address: str,
        since: datetime,
    ) -> list[ViewEvent]:
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT * FROM views
                WHERE resume_id = ? AND ip_address = ? AND timestamp >= ?
                ORDER BY timestamp DESC
                """,
                (resume_id, ip_address, format_dt(since)),
            ).fetchall()
        return [self._map_row(r) for r in rows]

    def list_views(
        self,
        resume_id: str,
        unique_only: bool = False,
        offset: int = 0,
        limit: int = 50,
    ) -> list[ViewEvent]:
        where, params = self._where(resume_id, unique_only)
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT * FROM views WHERE {where} ORDER BY timestamp DESC LIMIT ? OFFSET ?",
                (*params, limit, offset),
            ).fetchall()
        return [self._map_row(r) for r in rows]

    def count(self, resume_id: str, unique_only: bool = False) -> int:
        where, params = self._where(resume_id, unique_only)
        with self._connection() as conn:
            row = conn.execute(f"SELECT COUNT(*) AS n FROM views WHERE {where}", params).fetchone()
        return int(row["n"]) if row else 0

    def group_count(
        self, resume_id: str, field_name: BreakdownField
    ) -> list[tuple[str | None, int]]:
        column = _BREAKDOWN_COLUMNS.get(field_name)
        if column is None:
            raise ValueError(f"Cannot group views by '{field_name}'")

        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {column} AS value, COUNT(*) AS n FROM views "
                f"WHERE resume_id = ? GROUP BY {column}",
                (resume_id,),
            ).fetchall()
        return [(r["value"], int(r["n"])) for r in rows]

    def daily_counts(self, resume_id: str, since: datetime) -> list[DailyCount]:
        with self._connection() as conn:
            rows = conn.execute(
                """
                SELECT substr(timestamp, 1, 10) AS day, COUNT(*) AS n
                FROM views
                WHERE resume_id = ? AND timestamp >= ?
                GROUP BY day
                ORDER BY day ASC
                """,
                (resume_id, format_dt(since)),
            ).fetchall()

        result = []
        for r in rows:
            year, month, day = (int(part) for part in r["day"].split("-"))
            result.append(DailyCount(year=year, month=month, day=day, count=int(r["n"])))
        return result

    def _where(self, resume_id: str, unique_only: bool) -> tuple[str, tuple[Any, ...]]:
        if unique_only:
            return "resume_id = ? AND is_unique_view = 1", (resume_id,)
        return "resume_id = ?", (resume_id,)

    def _map_row(self, row: dict[str, Any]) -> ViewEvent:
        return ViewEvent(
            id=UUID(row["id"]),
            resume_id=row["resume_id"],
            unique_id=row["unique_id"],
            ip_address=row["ip_address"],
            user_agent=row["user_agent"],
            timestamp=parse_dt(row["timestamp"]),
            session_id=row["session_id"],
            browser_name=row["browser_name"],
            browser_version=row["browser_version"],
            device_type=row["device_type"],
            operating_system=row["operating_system"],
            referrer_url=row["referrer_url"],
            view_duration=row["view_duration"],
            is_unique_view=bool(row["is_unique_view"]),
        )


# -----------------------------------------------------------------------------
# Resumes
# -----------------------------------------------------------------------------


class SQLiteResumeRepo(SQLiteRepoBase):
    """SQLite implementation of ResumeRepoPort."""

    def get_by_unique_id(self, unique_id: str) -> Resume | None:
        with self._connection() as conn:
            row = conn.execute(
                "SELECT * FROM resumes WHERE unique_id = ?", (unique_id,)
            ).fetchone()
        return self._map_row(row) if row else None

    def save(self, resume: Resume) -> Resume:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO resumes (
                    id, unique_id, name, resume_data, owner_id, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name=excluded.name,
                    resume_data=excluded.resume_data,
                    updated_at=excluded.updated_at
                """,
                (
                    str(resume.id),
                    resume.unique_id,
                    resume.name,
                    json.dumps(resume.resume_data),
                    resume.owner_id,
                    format_dt(resume.created_at),
                    format_dt(resume.updated_at),
                ),
            )
        return resume

    def list_recent(self, limit: int = 50, owner_id: str | None = None) -> list[Resume]:
        with self._connection() as conn:
            if owner_id is None:
                rows = conn.execute(
                    "SELECT * FROM resumes ORDER BY created_at DESC LIMIT ?", (limit,)
                ).fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM resumes WHERE owner_id = ? ORDER BY created_at DESC LIMIT ?",
                    (owner_id, limit),
                ).fetchall()
        return [self._map_row(r) for r in rows]

    def delete(self, unique_id: str) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM resumes WHERE unique_id = ?", (unique_id,))

    def _map_row(self, row: dict[str, Any]) -> Resume:
        return Resume(
            id=UUID(row["id"]),
            unique_id=row["unique_id"],
            name=row["name"],
            resume_data=json.loads(row["resume_data"]) if row["resume_data"] else {},
            owner_id=row["owner_id"],
            created_at=parse_dt(row["created_at"]),
            updated_at=parse_dt(row["updated_at"]),
        )


# -----------------------------------------------------------------------------
# Uploads
# -----------------------------------------------------------------------------


class SQLiteUploadRepo(SQLiteRepoBase):
    """SQLite implementation of UploadRepoPort."""

    def get_by_id(self, upload_id: UUID) -> Upload | None:
        with self._connection() as conn:
            row = conn.execute("SELECT * FROM uploads WHERE id = ?", (str(upload_id),)).fetchone()
        return self._map_row(row) if row else None

    def save(self, upload: Upload) -> Upload:
        with self._connection() as conn:
            conn.execute(
                """
                INSERT INTO uploads (
                    id, title, filename, path, content_type, size_bytes, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    str(upload.id),
                    upload.title,
                    upload.filename,
                    upload.path,
                    upload.content_type,
                    upload.size_bytes,
                    format_dt(upload.created_at),
                ),
            )
        return upload

    def list_all(self) -> list[Upload]:
        with self._connection() as conn:
            rows = conn.execute("SELECT * FROM uploads ORDER BY created_at DESC").fetchall()
        return [self._map_row(r) for r in rows]

    def delete(self, upload_id: UUID) -> None:
        with self._connection() as conn:
            conn.execute("DELETE FROM uploads WHERE id = ?", (str(upload_id),))

    def _map_row(self, row: dict[str, Any]) -> Upload:
        return Upload(
            id=UUID(row["id"]),
            title=row["title"],
            filename=row["filename"],
            path=row["path"],
            content_type=row["content_type"],
            size_bytes=int(row["size_bytes"]),
            created_at=parse_dt(row["created_at"]),
        )
