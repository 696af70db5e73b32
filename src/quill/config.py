from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Quill"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = 8787
    app_base_url: str = "http://127.0.0.1:8787"
    log_level: str = "INFO"

    database_url: str = "sqlite:///./data/quill.db"
    data_dir: Path = Path("./data")

    completion_provider: str = "gemini"
    completion_fallback_to_mock: bool = False
    completion_timeout_sec: int = 60

    gemini_api_key: str = ""
    gemini_model: str = ""
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    google_application_credentials: str = ""

    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4o-mini"

    storage_backend: str = "local"
    storage_local_dir: Path = Path("./data/uploads")
    signed_url_ttl_sec: int = 3600
    supabase_url: str = ""
    supabase_service_role_key: str = ""

    upload_max_bytes: int = 10 * 1024 * 1024
    pdf_render_timeout_sec: int = 60

    web_ui_enabled: bool = True
    cors_origins: str = "http://127.0.0.1:8787"

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("completion_provider")
    @classmethod
    def validate_completion_provider(cls, value: str) -> str:
        allowed = {"gemini", "openai", "mock"}
        value = value.strip().lower()
        if value not in allowed:
            raise ValueError(f"completion_provider must be one of {sorted(allowed)}")
        return value

    @field_validator("storage_backend")
    @classmethod
    def validate_storage_backend(cls, value: str) -> str:
        allowed = {"local", "supabase"}
        value = value.strip().lower()
        if value not in allowed:
            raise ValueError(f"storage_backend must be one of {sorted(allowed)}")
        return value

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
