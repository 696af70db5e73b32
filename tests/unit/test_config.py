from __future__ import annotations

import pytest
from pydantic import ValidationError

from quill.config import Settings


def test_defaults_describe_local_development() -> None:
    settings = Settings(_env_file=None, completion_provider="gemini", storage_backend="local", app_env="development")

    assert settings.upload_max_bytes == 10 * 1024 * 1024
    assert settings.completion_timeout_sec == 60
    assert settings.completion_fallback_to_mock is False


def test_provider_and_backend_are_normalized() -> None:
    settings = Settings(completion_provider=" Mock ", storage_backend="LOCAL")
    assert settings.completion_provider == "mock"
    assert settings.storage_backend == "local"


@pytest.mark.parametrize(
    "overrides",
    [{"app_env": "qa"}, {"completion_provider": "llama"}, {"storage_backend": "s3"}],
)
def test_unknown_choices_are_rejected(overrides: dict) -> None:
    with pytest.raises(ValidationError):
        Settings(**overrides)


def test_cors_origins_are_split() -> None:
    settings = Settings(cors_origins="http://a.test, http://b.test,")
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]
