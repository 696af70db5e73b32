from __future__ import annotations

from quill.llm.prompts import (
    COVER_LETTER_TASK_MARKER,
    REDACTION_TASK_MARKER,
    RESUME_TASK_MARKER,
    build_cover_letter_prompt,
    build_redaction_prompt,
    build_resume_prompt,
    extract_redaction_payload,
)
from quill.types import JobData, ResumeData

RESUME = ResumeData(full_text="Jane Doe\nPython developer at Initech (2019 - 2024)")
JOB = JobData(title="Backend Engineer", company="Acme", full_text="Backend Engineer at Acme\nRequirements: Python, SQL")


def test_resume_prompt_embeds_both_documents_and_forbids_fabrication() -> None:
    prompt = build_resume_prompt(RESUME, JOB)

    assert prompt.startswith(RESUME_TASK_MARKER)
    assert "Python developer at Initech (2019 - 2024)" in prompt
    assert "Requirements: Python, SQL" in prompt
    assert "NEVER invent, add, or fabricate any dates, company names, job titles" in prompt
    assert '<div class="section">' in prompt
    assert prompt.rstrip().endswith("OUTPUT ONLY THE HTML, NO EXPLANATIONS:")


def test_cover_letter_prompt_requests_wrapped_html() -> None:
    prompt = build_cover_letter_prompt(RESUME, JOB)

    assert prompt.startswith(COVER_LETTER_TASK_MARKER)
    assert RESUME_TASK_MARKER not in prompt
    assert '<div class="cover-letter">' in prompt
    assert "3-4 paragraphs" in prompt
    assert "Jane Doe" in prompt


def test_resume_text_with_braces_is_not_treated_as_template() -> None:
    resume = ResumeData(full_text="Skills: {python} {sql}")
    prompt = build_resume_prompt(resume, JOB)
    assert "Skills: {python} {sql}" in prompt


def test_redaction_prompt_carries_html_verbatim() -> None:
    html = '<p class="contact">jane@example.com | 555-123-4567</p>\n<p>Second line</p>'
    prompt = build_redaction_prompt(html)

    assert prompt.startswith(REDACTION_TASK_MARKER)
    assert extract_redaction_payload(prompt) == html


def test_extract_redaction_payload_ignores_other_prompts() -> None:
    assert extract_redaction_payload(build_resume_prompt(RESUME, JOB)) == ""
