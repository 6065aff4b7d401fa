from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from resumeshare.adapters.sqlite.migrator import SQLiteMigrator
from resumeshare.api.auth_utils import SECRET_ENV_VAR, create_access_token
from resumeshare.api.deps import Settings, get_clock, get_rules, get_settings
from resumeshare.api.routes import analytics, resumes, uploads
from resumeshare.rules.loader import load_rules
from resumeshare.rules.models import Rules

ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = ROOT / "migrations"
TEST_SECRET = "test-secret"
T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class FixedClock:
    """Clock that returns a settable instant."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now


@pytest.fixture
def rules() -> Rules:
    return load_rules(ROOT / "rules.yaml")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    """Fresh SQLite database with all migrations applied."""
    path = str(tmp_path / "resumes.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def settings(tmp_path: Path, db_path: str, monkeypatch: pytest.MonkeyPatch) -> Settings:
    monkeypatch.setenv("RESUME_DATA_DIR", str(tmp_path))
    monkeypatch.setenv(SECRET_ENV_VAR, TEST_SECRET)
    s = Settings()
    assert s.db_path == db_path
    return s


@pytest.fixture
def app(settings: Settings, rules: Rules, clock: FixedClock) -> Iterator[FastAPI]:
    """Mini app with all routers, backed by a temporary database and uploads dir."""
    app = FastAPI()
    app.include_router(analytics.router, prefix="/api")
    app.include_router(resumes.router, prefix="/api/resume")
    app.include_router(uploads.router)

    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_clock] = lambda: clock
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(user_id: str = "user-1", role: str = "user", **claims: Any) -> str:
        data = {"id": user_id, "email": f"{user_id}@example.com", "role": role, **claims}
        return create_access_token(data, TEST_SECRET)

    return _make


@pytest.fixture
def auth_header(make_token: Callable[..., str]) -> Callable[..., dict[str, str]]:
    def _header(user_id: str = "user-1", role: str = "user") -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(user_id, role)}"}

    return _header
