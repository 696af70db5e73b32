from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse

from quill.api.deps import (
    get_app_settings,
    get_generation_orchestrator,
    get_intake_service,
    get_pdf_exporter,
    get_redactor,
    get_storage,
    get_version_service,
)
from quill.api.schemas import (
    DeleteVersionResponse,
    ExportRequest,
    ExportResponse,
    GenerateRequest,
    GenerateResponse,
    JobIntakeRequest,
    JobIntakeResponse,
    RedactRequest,
    RedactResponse,
    SaveVersionRequest,
    SaveVersionResponse,
    UploadResponse,
    VersionResponse,
    ViewMetricRequest,
    ViewMetricResponse,
)
from quill.config import Settings
from quill.core.generation import GenerationOrchestrator
from quill.core.intake import IntakeService
from quill.core.pdf import PdfExporter
from quill.core.redaction import RedactionOrchestrator
from quill.core.sharing import VersionService
from quill.errors import InvalidInputError, NotFoundError
from quill.storage.base import StorageBackend
from quill.storage.local import LocalStorage
from quill.types import RedactionOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["api"])


@router.post("/upload", response_model=UploadResponse)
def upload_resume(
    file: UploadFile | None = File(None),
    intake: IntakeService = Depends(get_intake_service),
) -> UploadResponse:
    if file is None:
        raise InvalidInputError("No file uploaded")

    result = intake.store_resume(
        filename=file.filename or "resume",
        content_type=file.content_type,
        data=file.file.read(),
    )
    return UploadResponse(**result.model_dump())


@router.post("/fetch-job", response_model=JobIntakeResponse)
def fetch_job(
    payload: JobIntakeRequest,
    intake: IntakeService = Depends(get_intake_service),
) -> JobIntakeResponse:
    result = intake.intake_job(
        job_url=payload.job_url,
        job_text=payload.job_text,
        title=payload.title,
        company=payload.company,
    )
    return JobIntakeResponse(**result.model_dump())


@router.post("/generate", response_model=GenerateResponse)
def generate(
    payload: GenerateRequest,
    orchestrator: GenerationOrchestrator = Depends(get_generation_orchestrator),
) -> GenerateResponse:
    result = orchestrator.generate(
        file_id=payload.file_id,
        resume_text=payload.resume_text,
        job_id=payload.job_id,
        job_text=payload.job_text,
    )
    return GenerateResponse(**result.model_dump())


@router.post("/redact", response_model=RedactResponse)
def redact(
    payload: RedactRequest,
    redactor: RedactionOrchestrator = Depends(get_redactor),
) -> RedactResponse:
    if not payload.html:
        raise InvalidInputError("HTML content is required")

    options = RedactionOptions(**payload.options.model_dump()) if payload.options else None
    result = redactor.redact(payload.html, options)
    return RedactResponse(redacted_html=result.redacted_html, method=result.method)


@router.post("/save-version", response_model=SaveVersionResponse)
def save_version(
    payload: SaveVersionRequest,
    versions: VersionService = Depends(get_version_service),
    settings: Settings = Depends(get_app_settings),
) -> SaveVersionResponse:
    result = versions.save_version(
        title=payload.title or "",
        resume_html=payload.resume_html or "",
        cover_html=payload.cover_html or "",
        file_id=payload.file_id,
        job_id=payload.job_id,
        is_public=payload.is_public,
    )
    return SaveVersionResponse(
        **result.model_dump(),
        share_url=f"{settings.app_base_url.rstrip('/')}/s/{result.public_token}",
    )


@router.get("/version/{version_id}", response_model=VersionResponse)
def get_version(version_id: str, versions: VersionService = Depends(get_version_service)) -> VersionResponse:
    return VersionResponse.model_validate(versions.get_version(version_id))


@router.delete("/version/{version_id}", response_model=DeleteVersionResponse)
def delete_version(
    version_id: str,
    versions: VersionService = Depends(get_version_service),
) -> DeleteVersionResponse:
    result = versions.delete_version(version_id)
    return DeleteVersionResponse(warnings=result.warnings)


@router.post("/metrics/view", response_model=ViewMetricResponse)
def record_view(
    payload: ViewMetricRequest,
    versions: VersionService = Depends(get_version_service),
) -> ViewMetricResponse:
    if not payload.version_id:
        raise InvalidInputError("versionId is required")

    result = versions.record_view(
        payload.version_id,
        session_id=payload.session_id,
        referrer=payload.referrer,
        user_agent=payload.user_agent,
    )
    logger.info("View recorded for version %s", payload.version_id)
    return ViewMetricResponse(view_id=result.view_id, warnings=result.warnings)


@router.post("/export", response_model=ExportResponse)
def export_pdf(
    payload: ExportRequest,
    exporter: PdfExporter = Depends(get_pdf_exporter),
) -> ExportResponse:
    result = exporter.export(payload.html or "", payload.title)
    return ExportResponse(**result.model_dump())


@router.get("/files/{bucket}/{path:path}")
def serve_file(
    bucket: str,
    path: str,
    storage: StorageBackend = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> FileResponse:
    if settings.app_env == "production" or not isinstance(storage, LocalStorage):
        raise NotFoundError("File serving disabled in production")

    full_path = storage.read_file(bucket, path)
    if full_path is None:
        raise NotFoundError("File not found")
    return FileResponse(full_path, filename=full_path.name)
