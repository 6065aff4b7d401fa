"""
Resumes component unit tests.

Tests for resume CRUD and owner/admin permission checks.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from resumeshare.components.resumes import (
    DeleteResumeInput,
    GetResumeInput,
    ListResumesInput,
    Principal,
    Resume,
    SaveResumeInput,
    UpdateResumeInput,
    can_modify,
    run_delete,
    run_get,
    run_list,
    run_save,
    run_update,
    validate_resume_data,
)

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)

# --- Mock Repository ---


class MockResumeRepo:
    """In-memory resume repository for testing."""

    def __init__(self) -> None:
        self._resumes: dict[str, Resume] = {}

    def get_by_unique_id(self, unique_id: str) -> Resume | None:
        return self._resumes.get(unique_id)

    def save(self, resume: Resume) -> Resume:
        self._resumes[resume.unique_id] = resume
        return resume

    def list_recent(self, limit: int = 50, owner_id: str | None = None) -> list[Resume]:
        items = [r for r in self._resumes.values() if owner_id is None or r.owner_id == owner_id]
        items.sort(key=lambda r: r.created_at, reverse=True)
        return items[:limit]

    def delete(self, unique_id: str) -> None:
        self._resumes.pop(unique_id, None)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def now_utc(self) -> datetime:
        return self.now


class StubRules:
    def get_default_name(self) -> str:
        return "My Resume"

    def get_list_limit(self) -> int:
        return 2


OWNER = Principal(id="user-1", email="owner@example.com")
STRANGER = Principal(id="user-2")
ADMIN = Principal(id="admin-1", role="admin")


@pytest.fixture
def repo() -> MockResumeRepo:
    return MockResumeRepo()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(T0)


def save(repo: MockResumeRepo, clock: FixedClock, owner: Principal | None = OWNER) -> Resume:
    result = run_save(
        SaveResumeInput(resume_data={"basics": {"name": "Ada"}}, name="CV", owner=owner),
        repo=repo,
        time_port=clock,
    )
    assert result.resume is not None
    return result.resume


# --- Validation ---


class TestValidateResumeData:
    def test_missing_rejected(self) -> None:
        errors = validate_resume_data(None)
        assert errors[0].code == "resume_data_required"

    def test_empty_object_accepted(self) -> None:
        assert validate_resume_data({}) == []

    def test_non_object_rejected(self) -> None:
        errors = validate_resume_data(["a", "b"])
        assert errors[0].code == "invalid_resume_data"

    def test_object_accepted(self) -> None:
        assert validate_resume_data({"work": []}) == []


# --- Save ---


class TestSave:
    def test_save_assigns_unique_id(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        first = save(repo, clock)
        second = save(repo, clock)

        assert first.unique_id != second.unique_id
        assert first.owner_id == "user-1"
        assert first.created_at == T0
        assert first.updated_at == T0
        assert repo.get_by_unique_id(first.unique_id) == first

    def test_default_name_from_rules(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        result = run_save(
            SaveResumeInput(resume_data={"a": 1}), repo=repo, rules=StubRules(), time_port=clock
        )

        assert result.resume is not None
        assert result.resume.name == "My Resume"
        assert result.resume.owner_id is None

    def test_default_name_without_rules(self, repo: MockResumeRepo) -> None:
        result = run_save(SaveResumeInput(resume_data={"a": 1}), repo=repo)

        assert result.resume is not None
        assert result.resume.name == "Untitled Resume"

    def test_missing_data_rejected(self, repo: MockResumeRepo) -> None:
        result = run_save(SaveResumeInput(resume_data=None), repo=repo)

        assert result.success is False
        assert result.errors[0].message == "Resume data is required"
        assert repo.list_recent() == []


# --- Get / List ---


class TestGetAndList:
    def test_get_existing(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        result = run_get(GetResumeInput(unique_id=resume.unique_id), repo=repo)

        assert result.success is True
        assert result.resume == resume

    def test_get_missing(self, repo: MockResumeRepo) -> None:
        result = run_get(GetResumeInput(unique_id="missing"), repo=repo)

        assert result.success is False
        assert result.errors[0].code == "not_found"

    def test_list_newest_first_and_capped(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        for i in range(3):
            clock.now = T0 + timedelta(minutes=i)
            save(repo, clock)

        result = run_list(ListResumesInput(limit=50), repo=repo, rules=StubRules())

        assert len(result.items) == 2
        assert result.items[0].created_at > result.items[1].created_at

    def test_list_scoped_to_owner(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        save(repo, clock, owner=OWNER)
        save(repo, clock, owner=STRANGER)

        result = run_list(ListResumesInput(owner_id=OWNER.id), repo=repo)

        assert [r.owner_id for r in result.items] == [OWNER.id]


# --- Update / Delete ---


class TestPermissions:
    def test_owner_and_admin_may_modify(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        assert can_modify(resume, OWNER) is True
        assert can_modify(resume, ADMIN) is True
        assert can_modify(resume, STRANGER) is False

    def test_anonymous_resume_admin_only(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock, owner=None)

        assert can_modify(resume, OWNER) is False
        assert can_modify(resume, ADMIN) is True


class TestUpdate:
    def test_owner_updates_name(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)
        clock.now = T0 + timedelta(hours=1)

        result = run_update(
            UpdateResumeInput(unique_id=resume.unique_id, principal=OWNER, name="New"),
            repo=repo,
            time_port=clock,
        )

        assert result.success is True
        stored = repo.get_by_unique_id(resume.unique_id)
        assert stored is not None
        assert stored.name == "New"
        assert stored.resume_data == resume.resume_data
        assert stored.created_at == T0
        assert stored.updated_at == T0 + timedelta(hours=1)

    def test_stranger_forbidden(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        result = run_update(
            UpdateResumeInput(unique_id=resume.unique_id, principal=STRANGER, name="Hijack"),
            repo=repo,
        )

        assert result.success is False
        assert result.errors[0].code == "forbidden"
        assert repo.get_by_unique_id(resume.unique_id) == resume

    def test_invalid_data_rejected(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        result = run_update(
            UpdateResumeInput(unique_id=resume.unique_id, principal=OWNER, resume_data="x"),
            repo=repo,
        )

        assert result.success is False
        assert result.errors[0].code == "invalid_resume_data"

    def test_missing_resume(self, repo: MockResumeRepo) -> None:
        result = run_update(UpdateResumeInput(unique_id="nope", principal=ADMIN), repo=repo)

        assert result.errors[0].code == "not_found"


class TestDelete:
    def test_admin_deletes(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        result = run_delete(
            DeleteResumeInput(unique_id=resume.unique_id, principal=ADMIN), repo=repo
        )

        assert result.success is True
        assert repo.get_by_unique_id(resume.unique_id) is None

    def test_stranger_forbidden(self, repo: MockResumeRepo, clock: FixedClock) -> None:
        resume = save(repo, clock)

        result = run_delete(
            DeleteResumeInput(unique_id=resume.unique_id, principal=STRANGER), repo=repo
        )

        assert result.errors[0].code == "forbidden"
        assert repo.get_by_unique_id(resume.unique_id) is not None
