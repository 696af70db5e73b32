from __future__ import annotations

import os
import tempfile
from pathlib import Path

_TEST_ROOT = Path(tempfile.mkdtemp(prefix="quill-tests-"))
os.environ["APP_ENV"] = "test"
os.environ["APP_BASE_URL"] = "http://testserver"
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT / 'quill-test.db'}"
os.environ["DATA_DIR"] = str(_TEST_ROOT)
os.environ["STORAGE_BACKEND"] = "local"
os.environ["STORAGE_LOCAL_DIR"] = str(_TEST_ROOT / "uploads")
os.environ["COMPLETION_PROVIDER"] = "mock"
os.environ["COMPLETION_FALLBACK_TO_MOCK"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from quill.api.app import create_app  # noqa: E402
from quill.config import get_settings  # noqa: E402
from quill.db.base import Base  # noqa: E402
from quill.db.session import engine  # noqa: E402
from quill.llm.providers import MockCompletionClient  # noqa: E402
from quill.storage.local import LocalStorage  # noqa: E402

FAKE_PDF_BYTES = b"%PDF-1.4\n% quill test document\n%%EOF\n"


@pytest.fixture(autouse=True)
def reset_db() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "storage", "http://testserver")


@pytest.fixture
def rendered_pdfs() -> list[dict]:
    return []


@pytest.fixture
def fake_renderer(rendered_pdfs: list[dict]):
    def render(html: str, title: str | None = None, timeout_sec: int = 60) -> bytes:
        rendered_pdfs.append({"html": html, "title": title, "timeout_sec": timeout_sec})
        return FAKE_PDF_BYTES

    return render


@pytest.fixture
def client(storage: LocalStorage, fake_renderer) -> TestClient:
    app = create_app(
        get_settings(),
        completion_client=MockCompletionClient(),
        storage=storage,
        pdf_renderer=fake_renderer,
    )
    return TestClient(app)
