from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from quill.types import DocumentSource, JobData, RawText, ResumeData, StructuredFields

RESUME_FIELDS = ("name", "contact", "summary", "experience", "education", "skills")
JOB_FIELDS = ("title", "company", "requirements", "description")


def as_source(value: Any) -> DocumentSource:
    """Tag an untyped payload (raw text or a record) for the validators."""
    if isinstance(value, (RawText, StructuredFields)):
        return value
    if isinstance(value, str):
        return RawText(value)
    if isinstance(value, Mapping):
        return StructuredFields(dict(value))
    return RawText("" if value is None else str(value))


def validate_resume_data(source: DocumentSource) -> ResumeData:
    if isinstance(source, RawText):
        return ResumeData(full_text=source.text)

    values = {name: _text(source.fields.get(name)) for name in RESUME_FIELDS}
    return ResumeData(**values, full_text=_full_text(source.fields))


def validate_job_data(source: DocumentSource) -> JobData:
    if isinstance(source, RawText):
        return JobData(full_text=source.text)

    values = {name: _text(source.fields.get(name)) for name in JOB_FIELDS}
    return JobData(**values, full_text=_full_text(source.fields))


def _text(value: Any) -> str:
    return str(value) if value else ""


def _full_text(fields: dict[str, Any]) -> str:
    value = fields.get("full_text") or fields.get("fullText")
    if value:
        return str(value)
    return json.dumps(fields, ensure_ascii=True, default=str)
