from __future__ import annotations

from typing import Protocol

RESUMES_BUCKET = "resumes"
EXPORTS_BUCKET = "exports"


class StorageBackend(Protocol):
    name: str

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        """Store ``data`` and return the path it was stored under."""
        ...

    def get_signed_url(self, bucket: str, path: str, expires_in: int = 3600) -> str: ...

    def delete_file(self, bucket: str, path: str) -> None: ...
