"""
Uploads component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from resumeshare.adapters.fs.filestore import FileSystemStore
from resumeshare.components.uploads import (
    DeleteUploadInput,
    GetUploadInput,
    Upload,
    UploadFileInput,
    generate_stored_name,
    guess_content_type,
    run_delete,
    run_get_content,
    run_list,
    run_upload,
    validate_extension,
    validate_size,
)

T0 = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class MockUploadRepo:
    """In-memory upload repository for testing."""

    def __init__(self) -> None:
        self._uploads: dict[UUID, Upload] = {}

    def get_by_id(self, upload_id: UUID) -> Upload | None:
        return self._uploads.get(upload_id)

    def save(self, upload: Upload) -> Upload:
        self._uploads[upload.id] = upload
        return upload

    def list_all(self) -> list[Upload]:
        return sorted(self._uploads.values(), key=lambda u: u.created_at, reverse=True)

    def delete(self, upload_id: UUID) -> None:
        self._uploads.pop(upload_id, None)


class StubRules:
    def get_max_upload_bytes(self) -> int:
        return 100

    def get_allowed_extensions(self) -> list[str]:
        return [".png", ".pdf"]


@pytest.fixture
def repo() -> MockUploadRepo:
    return MockUploadRepo()


@pytest.fixture
def storage(tmp_path: Path) -> FileSystemStore:
    return FileSystemStore(base_path=str(tmp_path / "uploads"))


def upload(
    repo: MockUploadRepo, storage: FileSystemStore, filename: str = "photo.png"
) -> Upload:
    result = run_upload(
        UploadFileInput(data=PNG, filename=filename, title="Headshot", content_type="image/png"),
        repo=repo,
        storage=storage,
        rules=StubRules(),
        now=T0,
    )
    assert result.upload is not None, result.errors
    return result.upload


class TestHelpers:
    def test_stored_name_has_millis(self) -> None:
        assert generate_stored_name("photo.png", T0) == f"photo-{int(T0.timestamp() * 1000)}.png"

    def test_stored_name_strips_directories(self) -> None:
        assert generate_stored_name("../../etc/cv.pdf", T0).startswith("cv-")

    def test_stored_name_without_extension(self) -> None:
        assert generate_stored_name("README", T0) == f"README-{int(T0.timestamp() * 1000)}"

    def test_content_type_guessed(self) -> None:
        assert guess_content_type("cv.pdf") == "application/pdf"
        assert guess_content_type("cv.pdf", "application/octet-stream") == "application/pdf"
        assert guess_content_type("x.png", "image/png") == "image/png"

    def test_extension_case_insensitive(self) -> None:
        assert validate_extension("PHOTO.PNG", [".png"]) == []
        assert validate_extension("run.exe", [".png"])[0].code == "invalid_extension"

    def test_size_limit(self) -> None:
        assert validate_size(100, 100) == []
        assert validate_size(101, 100)[0].code == "file_too_large"


class TestUpload:
    def test_upload_writes_file(
        self, repo: MockUploadRepo, storage: FileSystemStore
    ) -> None:
        stored = upload(repo, storage)

        assert stored.title == "Headshot"
        assert stored.size_bytes == len(PNG)
        assert stored.content_type == "image/png"
        assert storage.get(stored.path) == PNG
        assert repo.get_by_id(stored.id) == stored

    def test_missing_file_rejected(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        result = run_upload(UploadFileInput(data=None, filename=None), repo=repo, storage=storage)

        assert result.success is False
        assert result.errors[0].message == "No file uploaded."

    def test_disallowed_extension(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        result = run_upload(
            UploadFileInput(data=b"MZ", filename="tool.exe"),
            repo=repo,
            storage=storage,
            rules=StubRules(),
        )

        assert result.errors[0].code == "invalid_extension"
        assert repo.list_all() == []

    def test_too_large(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        result = run_upload(
            UploadFileInput(data=b"x" * 101, filename="big.png"),
            repo=repo,
            storage=storage,
            rules=StubRules(),
        )

        assert result.errors[0].code == "file_too_large"


class TestGetContent:
    def test_returns_bytes(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        stored = upload(repo, storage)

        result = run_get_content(GetUploadInput(upload_id=stored.id), repo=repo, storage=storage)

        assert result.success is True
        assert result.data == PNG

    def test_unknown_id(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        result = run_get_content(GetUploadInput(upload_id=uuid4()), repo=repo, storage=storage)

        assert result.errors[0].message == "Image Not Found"

    def test_file_missing_on_disk(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        stored = upload(repo, storage)
        storage.delete(stored.path)

        result = run_get_content(GetUploadInput(upload_id=stored.id), repo=repo, storage=storage)

        assert result.errors[0].code == "file_missing"


class TestListAndDelete:
    def test_list(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        stored = upload(repo, storage)

        assert run_list(repo=repo) == [stored]

    def test_delete_removes_file_and_record(
        self, repo: MockUploadRepo, storage: FileSystemStore
    ) -> None:
        stored = upload(repo, storage)

        result = run_delete(DeleteUploadInput(upload_id=stored.id), repo=repo, storage=storage)

        assert result.success is True
        assert repo.get_by_id(stored.id) is None
        assert storage.exists(stored.path) is False

    def test_delete_when_file_already_gone(
        self, repo: MockUploadRepo, storage: FileSystemStore
    ) -> None:
        stored = upload(repo, storage)
        storage.delete(stored.path)

        result = run_delete(DeleteUploadInput(upload_id=stored.id), repo=repo, storage=storage)

        assert result.success is True
        assert repo.get_by_id(stored.id) is None

    def test_delete_unknown(self, repo: MockUploadRepo, storage: FileSystemStore) -> None:
        result = run_delete(DeleteUploadInput(upload_id=uuid4()), repo=repo, storage=storage)

        assert result.errors[0].code == "not_found"
