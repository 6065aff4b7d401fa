"""
Uploads directory adapter.

Uploaded images and documents live flat under one directory, which main.py
also mounts read-only at /uploads. Names come from the uploads component
({stem}-{millis}{ext}); anything resolving outside the directory is refused.
"""

import os
from pathlib import Path


class FileSystemStore:
    """FileStorePort backed by the uploads directory."""

    def __init__(self, base_path: str):
        self.base_path = Path(base_path).resolve()
        os.makedirs(self.base_path, exist_ok=True)

    def _resolve(self, name: str) -> Path:
        target = (self.base_path / name).resolve()
        if not target.is_relative_to(self.base_path):
            raise ValueError(f"Path traversal attempt detected: {name}")
        return target

    def save(self, name: str, data: bytes) -> str:
        """Write an uploaded file, replacing any file of the same name.

        Returns the stored name relative to the uploads directory.
        """
        target = self._resolve(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        with open(target, "wb") as f:
            f.write(data)
        return target.relative_to(self.base_path).as_posix()

    def get(self, name: str) -> bytes:
        """Bytes of a stored upload. Raises FileNotFoundError when absent."""
        target = self._resolve(name)
        if not target.is_file():
            raise FileNotFoundError(f"Upload not found on disk: {name}")
        with open(target, "rb") as f:
            return f.read()

    def exists(self, name: str) -> bool:
        return self._resolve(name).is_file()

    def delete(self, name: str) -> None:
        """Remove a stored upload; a file already gone is not an error."""
        target = self._resolve(name)
        if target.is_file():
            os.remove(target)
