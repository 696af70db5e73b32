from __future__ import annotations

from quill.config import Settings
from quill.storage.base import StorageBackend
from quill.storage.local import LocalStorage
from quill.storage.supabase import SupabaseStorage


def create_storage(settings: Settings) -> StorageBackend:
    if settings.storage_backend == "supabase":
        return SupabaseStorage(settings.supabase_url, settings.supabase_service_role_key)
    return LocalStorage(settings.storage_local_dir, settings.app_base_url)
