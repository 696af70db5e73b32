from __future__ import annotations

from pathlib import Path

from sqlalchemy.engine import make_url

from quill.config import get_settings
from quill.db import models  # noqa: F401
from quill.db.base import Base
from quill.db.session import engine


def ensure_data_directories() -> None:
    settings = get_settings()
    paths: list[Path] = [settings.data_dir, settings.storage_local_dir]

    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        paths.append(Path(url.database).parent)

    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database() -> None:
    ensure_data_directories()
    Base.metadata.create_all(bind=engine)
