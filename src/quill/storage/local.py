from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from quill.errors import InvalidInputError, StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """Filesystem storage for development; files are served back by ``/api/files``."""

    name = "local"

    def __init__(self, base_dir: Path, base_url: str):
        self.base_dir = Path(base_dir)
        self.base_url = base_url.rstrip("/")

    def resolve(self, bucket: str, path: str) -> Path:
        for part in (bucket, path):
            pure = PurePosixPath(part)
            if not part or pure.is_absolute() or ".." in pure.parts or "~" in part or "\\" in part:
                raise InvalidInputError("Invalid file path")
        if "/" in bucket:
            raise InvalidInputError("Invalid file path")

        root = self.base_dir.resolve()
        full_path = (root / bucket / path).resolve()
        if not full_path.is_relative_to(root):
            raise InvalidInputError("Invalid file path")
        return full_path

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        full_path = self.resolve(bucket, path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
        except OSError as exc:
            raise StorageError(f"Failed to upload file: {exc}") from exc
        logger.info("Stored %s bytes at %s/%s (%s)", len(data), bucket, path, content_type)
        return path

    def get_signed_url(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        self.resolve(bucket, path)
        return f"{self.base_url}/api/files/{quote(bucket)}/{quote(path)}"

    def delete_file(self, bucket: str, path: str) -> None:
        full_path = self.resolve(bucket, path)
        try:
            full_path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageError(f"Failed to delete file: {exc}") from exc

    def read_file(self, bucket: str, path: str) -> Path | None:
        full_path = self.resolve(bucket, path)
        return full_path if full_path.is_file() else None
