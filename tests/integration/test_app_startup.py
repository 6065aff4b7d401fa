"""
Startup wiring: rules load, migrations run, routers and static files mounted.
"""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from resumeshare.api import main
from resumeshare.api.deps import Settings

ROOT = Path(__file__).resolve().parents[2]


@pytest.fixture
def settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Settings]:
    monkeypatch.setenv("RESUME_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RESUME_RULES_PATH", str(ROOT / "rules.yaml"))
    monkeypatch.setenv("RESUME_MIGRATIONS_DIR", str(ROOT / "migrations"))
    monkeypatch.setenv("ACCESS_TOKEN_SECRET", "startup-secret")
    s = Settings()
    monkeypatch.setattr(main, "settings", s)
    main.app.dependency_overrides[main.get_settings] = lambda: s
    yield s
    main.app.dependency_overrides.clear()


def test_startup_migrates_and_serves(settings: Settings) -> None:
    with TestClient(main.app) as client:
        assert Path(settings.db_path).exists()
        assert settings.uploads_dir.is_dir()

        assert client.get("/health").json() == {"status": "ok", "service": "api"}
        assert client.get("/").json() == "Resume Share API is running"

        response = client.post("/api/track-view", json={"resumeId": "r1"})
        assert response.status_code == 201
        summary = client.get("/api/analytics/r1").json()["data"]["summary"]
        assert summary["totalViews"] == 1

