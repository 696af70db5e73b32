from __future__ import annotations

import logging
import secrets

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from quill.core.redaction import RedactionOrchestrator
from quill.db.base import new_id
from quill.db.models import FIELD_TRUNCATE_LENGTH, Version
from quill.db.repositories import Repository
from quill.errors import InvalidInputError, NotFoundError, PersistenceError
from quill.types import DeleteVersionResult, SaveVersionResult, ViewRecordResult

logger = logging.getLogger(__name__)

TOKEN_ATTEMPTS = 3


def generate_public_token() -> str:
    return secrets.token_urlsafe(24)


def _truncate(value: str | None) -> str | None:
    if value is None:
        return None
    return value[:FIELD_TRUNCATE_LENGTH]


class VersionService:
    def __init__(self, repo: Repository, redactor: RedactionOrchestrator):
        self.repo = repo
        self.redactor = redactor

    def save_version(
        self,
        *,
        title: str,
        resume_html: str,
        cover_html: str,
        file_id: str | None = None,
        job_id: str | None = None,
        is_public: bool = True,
    ) -> SaveVersionResult:
        if not title or not resume_html or not cover_html:
            raise InvalidInputError("Title, resumeHtml, and coverHtml are required")

        warnings: list[str] = []
        resume_redacted = resume_html
        cover_redacted = cover_html
        if is_public:
            resume_redacted = self._redact_or_keep(resume_html, "resume", warnings)
            cover_redacted = self._redact_or_keep(cover_html, "cover letter", warnings)

        version_id = new_id()
        for attempt in range(1, TOKEN_ATTEMPTS + 1):
            token = generate_public_token()
            try:
                version = self.repo.create_version(
                    version_id=version_id,
                    title=title,
                    resume_html=resume_html,
                    resume_html_redacted=resume_redacted,
                    cover_html=cover_html,
                    cover_html_redacted=cover_redacted,
                    public_token=token,
                    is_public=is_public,
                    file_id=file_id,
                    job_id=job_id,
                )
                break
            except IntegrityError as exc:
                self.repo.rollback()
                logger.warning("Public token collision attempt=%s: %s", attempt, exc.orig)
            except SQLAlchemyError as exc:
                self.repo.rollback()
                logger.exception("Failed to save version")
                raise PersistenceError(f"Failed to save version: {exc}") from exc
        else:
            raise PersistenceError("Failed to save version: could not allocate a unique public token")

        logger.info("Version saved id=%s public=%s", version.id, is_public)
        return SaveVersionResult(
            version_id=version.id,
            public_token=version.public_token,
            title=version.title,
            is_public=version.is_public,
            warnings=warnings,
        )

    def _redact_or_keep(self, html: str, label: str, warnings: list[str]) -> str:
        try:
            return self.redactor.redact(html).redacted_html
        except Exception as exc:
            logger.exception("Redaction failed for %s, keeping original", label)
            warnings.append(f"Redaction failed for {label}: {exc}")
            return html

    def get_version(self, version_id: str) -> Version:
        version = self.repo.get_version(version_id)
        if version is None:
            raise NotFoundError("Version not found")
        return version

    def get_by_public_token(self, public_token: str) -> Version:
        version = self.repo.get_public_version_by_token(public_token)
        if version is None:
            raise NotFoundError("Version not found")
        return version

    def list_versions(self, limit: int = 50) -> list[Version]:
        return self.repo.list_versions(limit=limit)

    def delete_version(self, version_id: str) -> DeleteVersionResult:
        self.get_version(version_id)

        warnings: list[str] = []
        try:
            removed = self.repo.delete_views_for_version(version_id)
            logger.info("Deleted %s views for version id=%s", removed, version_id)
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.warning("Failed to delete views for version id=%s: %s", version_id, exc)
            warnings.append(f"Failed to delete views: {exc}")

        try:
            self.repo.delete_version(version_id)
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.exception("Failed to delete version id=%s", version_id)
            raise PersistenceError(f"Failed to delete version: {exc}") from exc

        logger.info("Version deleted id=%s", version_id)
        return DeleteVersionResult(version_id=version_id, warnings=warnings)

    def record_view(
        self,
        version_id: str,
        *,
        session_id: str | None = None,
        referrer: str | None = None,
        user_agent: str | None = None,
    ) -> ViewRecordResult:
        self.get_version(version_id)

        try:
            view = self.repo.create_view(
                version_id=version_id,
                session_id=session_id,
                referrer=_truncate(referrer),
                user_agent=_truncate(user_agent),
            )
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.exception("Failed to record view version_id=%s", version_id)
            raise PersistenceError(f"Failed to record view: {exc}") from exc

        warnings: list[str] = []
        try:
            self.repo.increment_version_views(version_id)
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.warning("Failed to increment views version_id=%s: %s", version_id, exc)
            warnings.append(f"Failed to update view count: {exc}")

        return ViewRecordResult(view_id=view.id, warnings=warnings)
