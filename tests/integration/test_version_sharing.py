from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from quill.core.redaction import RedactionOrchestrator
from quill.core.sharing import VersionService
from quill.db.models import View
from quill.db.repositories import Repository
from quill.db.session import SessionLocal
from quill.errors import InvalidInputError, NotFoundError, PersistenceError
from quill.llm.prompts import EMAIL_PLACEHOLDER, PHONE_PLACEHOLDER
from quill.llm.providers import MockCompletionClient

RESUME_HTML = '<div class="resume"><h1>Jane Doe</h1><p>jane@example.com | (555) 123-4567</p></div>'
COVER_HTML = '<div class="cover-letter"><p>Reach me at 555.987.6543.</p></div>'


class ExplodingRedactor:
    def redact(self, html, options=None):
        raise RuntimeError("redactor offline")


def _service(db, redactor=None) -> VersionService:
    return VersionService(Repository(db), redactor or RedactionOrchestrator(MockCompletionClient()))


def _save(db, **overrides):
    values = {"title": "Acme application", "resume_html": RESUME_HTML, "cover_html": COVER_HTML}
    values.update(overrides)
    return _service(db).save_version(**values)


def test_public_version_stores_redacted_copies() -> None:
    with SessionLocal() as db:
        saved = _save(db)
        version = _service(db).get_version(saved.version_id)

    assert saved.is_public is True
    assert saved.warnings == []
    assert version.resume_html == RESUME_HTML
    assert "jane@example.com" not in version.resume_html_redacted
    assert EMAIL_PLACEHOLDER in version.resume_html_redacted
    assert PHONE_PLACEHOLDER in version.cover_html_redacted
    assert version.views == 0


def test_private_version_keeps_originals_and_is_hidden_from_token_lookup() -> None:
    with SessionLocal() as db:
        saved = _save(db, is_public=False)
        service = _service(db)
        version = service.get_version(saved.version_id)

        assert version.resume_html_redacted == RESUME_HTML
        assert version.cover_html_redacted == COVER_HTML
        with pytest.raises(NotFoundError, match="Version not found"):
            service.get_by_public_token(saved.public_token)


def test_public_token_lookup_returns_version() -> None:
    with SessionLocal() as db:
        saved = _save(db)
        version = _service(db).get_by_public_token(saved.public_token)
    assert version.id == saved.version_id


def test_redaction_failure_keeps_original_and_warns() -> None:
    with SessionLocal() as db:
        service = _service(db, ExplodingRedactor())
        saved = service.save_version(title="t", resume_html=RESUME_HTML, cover_html=COVER_HTML)
        version = service.get_version(saved.version_id)

    assert len(saved.warnings) == 2
    assert "redactor offline" in saved.warnings[0]
    assert version.resume_html_redacted == RESUME_HTML


@pytest.mark.parametrize("missing", ["title", "resume_html", "cover_html"])
def test_required_fields(missing: str) -> None:
    with SessionLocal() as db:
        with pytest.raises(InvalidInputError) as exc_info:
            _save(db, **{missing: ""})
    assert exc_info.value.message == "Title, resumeHtml, and coverHtml are required"


def test_token_collision_is_retried(monkeypatch) -> None:
    with SessionLocal() as db:
        first = _save(db)
        tokens = iter([first.public_token, "fresh-token"])
        monkeypatch.setattr("quill.core.sharing.generate_public_token", lambda: next(tokens))

        second = _save(db, title="Second")

    assert second.public_token == "fresh-token"
    assert second.version_id != first.version_id


def test_token_collisions_give_up_after_three_attempts(monkeypatch) -> None:
    with SessionLocal() as db:
        first = _save(db)
        monkeypatch.setattr("quill.core.sharing.generate_public_token", lambda: first.public_token)

        with pytest.raises(PersistenceError):
            _save(db, title="Second")
        assert len(_service(db).list_versions()) == 1


def test_tokens_are_unique_and_url_safe() -> None:
    with SessionLocal() as db:
        tokens = {_save(db, title=f"v{i}").public_token for i in range(5)}
    assert len(tokens) == 5
    assert all(token.replace("-", "").replace("_", "").isalnum() for token in tokens)


def test_record_view_inserts_row_and_increments_counter() -> None:
    with SessionLocal() as db:
        saved = _save(db)
        service = _service(db)
        result = service.record_view(
            saved.version_id,
            session_id="s1",
            referrer="https://example.com/" + "r" * 800,
            user_agent="UA" * 400,
        )
        version = service.get_version(saved.version_id)
        db.refresh(version)
        view = db.get(View, result.view_id)

    assert result.warnings == []
    assert version.views == 1
    assert len(view.referrer) == 500
    assert len(view.user_agent) == 500


def test_record_view_for_unknown_version_writes_nothing() -> None:
    with SessionLocal() as db:
        with pytest.raises(NotFoundError):
            _service(db).record_view("no-such-version")
        assert db.scalar(select(func.count()).select_from(View)) == 0


def test_counter_failure_is_a_warning(monkeypatch) -> None:
    with SessionLocal() as db:
        saved = _save(db)
        repo = Repository(db)
        service = VersionService(repo, RedactionOrchestrator(MockCompletionClient()))

        def broken_increment(version_id: str) -> None:
            raise OperationalError("UPDATE versions", {}, Exception("database is locked"))

        monkeypatch.setattr(repo, "increment_version_views", broken_increment)
        result = service.record_view(saved.version_id)

        assert len(result.warnings) == 1
        assert repo.count_views(saved.version_id) == 1


def test_concurrent_views_are_all_counted() -> None:
    with SessionLocal() as db:
        version_id = _save(db).version_id

    def record(i: int) -> str:
        with SessionLocal() as session:
            return _service(session).record_view(version_id, session_id=f"s{i}").view_id

    with ThreadPoolExecutor(max_workers=4) as pool:
        view_ids = list(pool.map(record, range(12)))

    with SessionLocal() as db:
        version = _service(db).get_version(version_id)
        assert len(set(view_ids)) == 12
        assert version.views == 12
        assert Repository(db).count_views(version_id) == 12


def test_delete_removes_version_and_views() -> None:
    with SessionLocal() as db:
        saved = _save(db)
        service = _service(db)
        service.record_view(saved.version_id)
        service.record_view(saved.version_id)

        result = service.delete_version(saved.version_id)

        assert result.warnings == []
        assert Repository(db).count_views(saved.version_id) == 0
        with pytest.raises(NotFoundError):
            service.get_version(saved.version_id)
        with pytest.raises(NotFoundError):
            service.delete_version(saved.version_id)


def test_view_cleanup_failure_is_a_warning(monkeypatch) -> None:
    with SessionLocal() as db:
        saved = _save(db)
        repo = Repository(db)
        service = VersionService(repo, RedactionOrchestrator(MockCompletionClient()))
        service.record_view(saved.version_id)

        def broken_cleanup(version_id: str) -> int:
            raise OperationalError("DELETE FROM views", {}, Exception("disk I/O error"))

        monkeypatch.setattr(repo, "delete_views_for_version", broken_cleanup)
        result = service.delete_version(saved.version_id)

        assert len(result.warnings) == 1
        assert repo.get_version(saved.version_id) is None
        assert repo.count_views(saved.version_id) == 0
