from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from quill.core.validation import as_source, validate_job_data, validate_resume_data
from quill.db.repositories import Repository
from quill.errors import CompletionError, MissingJobError, MissingResumeError, NotFoundError
from quill.llm.prompts import build_cover_letter_prompt, build_resume_prompt
from quill.llm.providers import mock_generate_completion
from quill.types import CompletionOptions, GenerationResult, JobData

if TYPE_CHECKING:
    from quill.llm.providers import CompletionClient

logger = logging.getLogger(__name__)

RESUME_COMPLETION = CompletionOptions(max_tokens=2048, temperature=0.7)
COVER_LETTER_COMPLETION = CompletionOptions(max_tokens=1024, temperature=0.8)


def build_summary(job: JobData) -> str:
    summary = "Generated tailored resume"
    if job.title:
        summary += f" for {job.title}"
    if job.company:
        summary += f" at {job.company}"
    return summary


class GenerationOrchestrator:
    def __init__(self, repo: Repository, client: CompletionClient, *, fallback_to_mock: bool = False):
        self.repo = repo
        self.client = client
        self.fallback_to_mock = fallback_to_mock

    def generate(
        self,
        *,
        file_id: str | None = None,
        resume_text: str | None = None,
        job_id: str | None = None,
        job_text: str | None = None,
    ) -> GenerationResult:
        if not file_id and not resume_text:
            raise MissingResumeError()
        if not job_id and not job_text:
            raise MissingJobError()

        if file_id:
            stored_file = self.repo.get_file(file_id)
            if stored_file is None:
                raise NotFoundError("File not found")
            resume = validate_resume_data(as_source(stored_file.text_content))
        else:
            resume = validate_resume_data(as_source(resume_text))

        if job_id:
            stored_job = self.repo.get_job(job_id)
            if stored_job is None:
                raise NotFoundError("Job not found")
            job = validate_job_data(
                as_source(
                    {
                        "title": stored_job.title,
                        "company": stored_job.company,
                        "full_text": stored_job.content,
                    }
                )
            )
        else:
            job = validate_job_data(as_source(job_text))

        logger.info(
            "Generating documents client=%s resume_chars=%s job_chars=%s",
            getattr(self.client, "name", "unknown"),
            len(resume.full_text),
            len(job.full_text),
        )
        resume_html = self._complete(build_resume_prompt(resume, job), RESUME_COMPLETION, "resume")
        cover_html = self._complete(build_cover_letter_prompt(resume, job), COVER_LETTER_COMPLETION, "cover letter")

        return GenerationResult(
            tailored_resume_html=resume_html,
            cover_letter_html=cover_html,
            summary=build_summary(job),
        )

    def _complete(self, prompt: str, options: CompletionOptions, label: str) -> str:
        try:
            return self.client.generate_completion(prompt, options)
        except CompletionError as exc:
            if not self.fallback_to_mock:
                raise
            logger.warning("Completion failed for %s, using mock output: %s", label, exc.message)
            return mock_generate_completion(prompt, options)
