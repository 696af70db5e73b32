from __future__ import annotations

from collections.abc import Generator

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from quill.config import Settings
from quill.core.generation import GenerationOrchestrator
from quill.core.intake import IntakeService
from quill.core.pdf import PdfExporter, PdfRenderer
from quill.core.redaction import RedactionOrchestrator
from quill.core.sharing import VersionService
from quill.db.repositories import Repository
from quill.db.session import get_db_session
from quill.llm.providers import CompletionClient
from quill.storage.base import StorageBackend


def get_db() -> Generator[Session, None, None]:
    yield from get_db_session()


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageBackend:
    return request.app.state.storage


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def get_pdf_renderer(request: Request) -> PdfRenderer:
    return request.app.state.pdf_renderer


def get_repository(db: Session = Depends(get_db)) -> Repository:
    return Repository(db)


def get_intake_service(
    repo: Repository = Depends(get_repository),
    storage: StorageBackend = Depends(get_storage),
    settings: Settings = Depends(get_app_settings),
) -> IntakeService:
    return IntakeService(repo, storage, settings)


def get_generation_orchestrator(
    repo: Repository = Depends(get_repository),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_app_settings),
) -> GenerationOrchestrator:
    return GenerationOrchestrator(repo, client, fallback_to_mock=settings.completion_fallback_to_mock)


def get_redactor(client: CompletionClient = Depends(get_completion_client)) -> RedactionOrchestrator:
    return RedactionOrchestrator(client)


def get_version_service(
    repo: Repository = Depends(get_repository),
    redactor: RedactionOrchestrator = Depends(get_redactor),
) -> VersionService:
    return VersionService(repo, redactor)


def get_pdf_exporter(
    storage: StorageBackend = Depends(get_storage),
    renderer: PdfRenderer = Depends(get_pdf_renderer),
    settings: Settings = Depends(get_app_settings),
) -> PdfExporter:
    return PdfExporter(
        storage,
        renderer,
        timeout_sec=settings.pdf_render_timeout_sec,
        signed_url_ttl_sec=settings.signed_url_ttl_sec,
    )
