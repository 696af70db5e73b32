from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

RedactionMethod = Literal["ai", "regex"]


class ResumeData(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    contact: str = ""
    summary: str = ""
    experience: str = ""
    education: str = ""
    skills: str = ""
    full_text: str


class JobData(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    company: str = ""
    requirements: str = ""
    description: str = ""
    full_text: str


@dataclass(slots=True, frozen=True)
class RawText:
    text: str


@dataclass(slots=True, frozen=True)
class StructuredFields:
    fields: dict[str, Any] = field(default_factory=dict)


DocumentSource = RawText | StructuredFields


class CompletionOptions(BaseModel):
    max_tokens: int = Field(default=2048, gt=0)
    temperature: float = Field(default=0.7, ge=0.0, le=1.0)
    model: str | None = None


class RedactionOptions(BaseModel):
    redact_emails: bool = True
    redact_phones: bool = True
    redact_addresses: bool = False


class GenerationResult(BaseModel):
    tailored_resume_html: str
    cover_letter_html: str
    summary: str


class RedactionResult(BaseModel):
    redacted_html: str
    method: RedactionMethod


class SaveVersionResult(BaseModel):
    version_id: str
    public_token: str
    title: str
    is_public: bool
    warnings: list[str] = Field(default_factory=list)


class ViewRecordResult(BaseModel):
    view_id: str
    warnings: list[str] = Field(default_factory=list)


class DeleteVersionResult(BaseModel):
    version_id: str
    warnings: list[str] = Field(default_factory=list)


class UploadResult(BaseModel):
    file_id: str
    filename: str
    size: int
    text_preview: str


class JobIntakeResult(BaseModel):
    job_id: str
    title: str | None = None
    company: str | None = None
    url: str | None = None
    content_preview: str


class ExportResult(BaseModel):
    url: str
    filename: str
