from __future__ import annotations

import logging
from urllib.parse import quote

import requests

from quill.errors import StorageError

logger = logging.getLogger(__name__)


class SupabaseStorage:
    """Supabase Storage over its REST API."""

    name = "supabase"

    def __init__(
        self,
        url: str,
        service_key: str,
        *,
        timeout_sec: int = 30,
        http: requests.Session | None = None,
    ):
        if not url or not service_key:
            raise StorageError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are required for supabase storage")
        self.url = url.rstrip("/")
        self.service_key = service_key
        self.timeout_sec = timeout_sec
        self.http = http or requests.Session()

    def _headers(self, **extra: str) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            **extra,
        }

    def _object_url(self, *segments: str) -> str:
        return "/".join([f"{self.url}/storage/v1/object", *(quote(s) for s in segments)])

    def upload_file(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        try:
            response = self.http.post(
                self._object_url(bucket, path),
                data=data,
                headers=self._headers(**{"Content-Type": content_type, "x-upsert": "true"}),
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise StorageError(f"Failed to upload file: {exc}") from exc
        return path

    def get_signed_url(self, bucket: str, path: str, expires_in: int = 3600) -> str:
        try:
            response = self.http.post(
                self._object_url("sign", bucket, path),
                json={"expiresIn": expires_in},
                headers=self._headers(),
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
            payload = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise StorageError(f"Failed to create signed URL: {exc}") from exc

        signed = (payload.get("signedURL") or payload.get("signedUrl")) if isinstance(payload, dict) else None
        if not signed:
            raise StorageError("Failed to create signed URL: empty response")
        if signed.startswith("http"):
            return signed
        return f"{self.url}/storage/v1{signed}"

    def delete_file(self, bucket: str, path: str) -> None:
        try:
            response = self.http.delete(
                self._object_url(bucket),
                json={"prefixes": [path]},
                headers=self._headers(),
                timeout=self.timeout_sec,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            raise StorageError(f"Failed to delete file: {exc}") from exc
