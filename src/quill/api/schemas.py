from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UploadResponse(CamelModel):
    file_id: str
    filename: str
    size: int
    text_preview: str


class JobIntakeRequest(CamelModel):
    job_url: str | None = None
    job_text: str | None = None
    title: str | None = None
    company: str | None = None


class JobIntakeResponse(CamelModel):
    job_id: str
    title: str | None = None
    company: str | None = None
    url: str | None = None
    content_preview: str


class GenerateRequest(CamelModel):
    file_id: str | None = None
    resume_text: str | None = None
    job_id: str | None = None
    job_text: str | None = None


class GenerateResponse(CamelModel):
    tailored_resume_html: str
    cover_letter_html: str
    summary: str


class RedactionOptionsPayload(CamelModel):
    redact_emails: bool = True
    redact_phones: bool = True
    redact_addresses: bool = False


class RedactRequest(CamelModel):
    html: str | None = None
    options: RedactionOptionsPayload | None = None


class RedactResponse(CamelModel):
    redacted_html: str
    method: Literal["ai", "regex"]


class SaveVersionRequest(CamelModel):
    title: str | None = None
    resume_html: str | None = None
    cover_html: str | None = None
    file_id: str | None = None
    job_id: str | None = None
    is_public: bool = True


class SaveVersionResponse(CamelModel):
    version_id: str
    public_token: str
    title: str
    is_public: bool
    share_url: str
    warnings: list[str] = Field(default_factory=list)


class VersionResponse(CamelModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    file_id: str | None = None
    job_id: str | None = None
    title: str
    resume_html: str
    resume_html_redacted: str
    cover_html: str
    cover_html_redacted: str
    public_token: str
    views: int
    is_public: bool
    created_at: datetime
    updated_at: datetime


class DeleteVersionResponse(CamelModel):
    success: bool = True
    message: str = "Version deleted successfully"
    warnings: list[str] = Field(default_factory=list)


class ViewMetricRequest(CamelModel):
    version_id: str | None = None
    session_id: str | None = None
    referrer: str | None = None
    user_agent: str | None = None


class ViewMetricResponse(CamelModel):
    success: bool = True
    view_id: str
    warnings: list[str] = Field(default_factory=list)


class ExportRequest(CamelModel):
    html: str | None = None
    title: str | None = None


class ExportResponse(CamelModel):
    url: str
    filename: str
