from __future__ import annotations

import logging

from quill.config import Settings
from quill.core.extraction import extract_text, resolve_mime_type
from quill.core.job_fetcher import fetch_job_text, guess_title_and_company
from quill.db.base import new_id
from quill.db.repositories import Repository
from quill.errors import ExtractionError, InvalidInputError
from quill.storage.base import RESUMES_BUCKET, StorageBackend
from quill.types import JobIntakeResult, UploadResult

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 200
MIN_JOB_TEXT_LENGTH = 10


def preview(text: str, limit: int = PREVIEW_LENGTH) -> str:
    return text[:limit] + ("..." if len(text) > limit else "")


class IntakeService:
    def __init__(self, repo: Repository, storage: StorageBackend, settings: Settings):
        self.repo = repo
        self.storage = storage
        self.settings = settings

    def store_resume(self, *, filename: str, content_type: str | None, data: bytes) -> UploadResult:
        if not data:
            raise InvalidInputError("No file uploaded")
        if len(data) > self.settings.upload_max_bytes:
            limit_mb = self.settings.upload_max_bytes // (1024 * 1024)
            raise InvalidInputError(f"File too large. Maximum size is {limit_mb}MB.")

        mime_type = resolve_mime_type(content_type, filename)
        text_content = extract_text(data, mime_type)
        if not text_content.strip():
            raise ExtractionError("No text could be extracted from file")

        file_id = new_id()
        extension = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
        storage_path = self.storage.upload_file(
            RESUMES_BUCKET, f"{file_id}.{extension}", data, mime_type
        )
        row = self.repo.create_file(
            file_id=file_id,
            filename=filename,
            file_size=len(data),
            file_type=mime_type,
            storage_path=storage_path,
            text_content=text_content,
        )

        text_preview = preview(text_content)
        logger.info("File uploaded id=%s name=%s size=%s", row.id, filename, len(data))
        return UploadResult(file_id=row.id, filename=filename, size=len(data), text_preview=text_preview)

    def intake_job(
        self,
        *,
        job_url: str | None = None,
        job_text: str | None = None,
        title: str | None = None,
        company: str | None = None,
    ) -> JobIntakeResult:
        if not job_url and not job_text:
            raise InvalidInputError("Either jobUrl or jobText must be provided")

        url: str | None = None
        if job_text:
            content = job_text.strip()
            if len(content) < MIN_JOB_TEXT_LENGTH:
                raise InvalidInputError("Job text is too short")
        else:
            content = fetch_job_text(job_url, timeout_sec=self.settings.completion_timeout_sec)
            url = job_url

        guessed_title, guessed_company = guess_title_and_company(content)
        title = (title or "").strip() or guessed_title
        company = (company or "").strip() or guessed_company

        job = self.repo.create_job(content=content, title=title, company=company, url=url)
        logger.info("Job saved id=%s title=%s company=%s", job.id, title or "Untitled", company or "")
        return JobIntakeResult(
            job_id=job.id,
            title=job.title,
            company=job.company,
            url=job.url,
            content_preview=preview(content),
        )
