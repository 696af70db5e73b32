from __future__ import annotations

import json
import mimetypes
from pathlib import Path

import typer
import uvicorn
from sqlalchemy.orm import Session

from quill.api.app import create_app
from quill.config import get_settings
from quill.core.extraction import extract_text, resolve_mime_type
from quill.core.generation import GenerationOrchestrator
from quill.core.pdf import render_pdf
from quill.core.redaction import RedactionOrchestrator
from quill.core.sharing import VersionService
from quill.db.init import init_database
from quill.db.repositories import Repository
from quill.db.seed import SAMPLE_PUBLIC_TOKEN, seed_sample_data
from quill.db.session import SessionLocal
from quill.errors import QuillError
from quill.llm.providers import create_completion_client
from quill.logging_config import configure_logging

app = typer.Typer(help="Quill resume tailoring CLI")
versions_app = typer.Typer(help="Saved resume versions")

app.add_typer(versions_app, name="versions")

_INITIALIZED = False


def ensure_initialized() -> None:
    global _INITIALIZED
    if _INITIALIZED:
        return
    init_database()
    _INITIALIZED = True


def _fail(exc: QuillError) -> typer.Exit:
    typer.echo(json.dumps({"error": exc.message}, indent=2), err=True)
    return typer.Exit(code=1)


def _version_service(db: Session) -> VersionService:
    return VersionService(Repository(db), RedactionOrchestrator(create_completion_client(get_settings())))


def _read_document(path: Path) -> str:
    mime_type = resolve_mime_type(mimetypes.guess_type(path.name)[0], path.name)
    return extract_text(path.read_bytes(), mime_type)


@app.command("init")
def init_cmd() -> None:
    """Initialize database and data directories."""
    configure_logging()
    init_database()
    typer.echo(json.dumps({"ok": True}, indent=2))


@app.command("seed")
def seed_cmd() -> None:
    """Insert a sample job, resume and public version."""
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        inserted = seed_sample_data(db)
    settings = get_settings()
    typer.echo(
        json.dumps(
            {
                "inserted": inserted,
                "share_url": f"{settings.app_base_url.rstrip('/')}/s/{SAMPLE_PUBLIC_TOKEN}",
            },
            indent=2,
        )
    )


@app.command("generate")
def generate_cmd(
    resume: Path = typer.Option(..., "--resume", exists=True, readable=True),
    job: Path = typer.Option(..., "--job", exists=True, readable=True),
    out_dir: Path | None = typer.Option(None, "--out-dir"),
) -> None:
    """Tailor a resume file to a job description file."""
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    client = create_completion_client(settings)

    try:
        resume_text = _read_document(resume)
        with SessionLocal() as db:
            orchestrator = GenerationOrchestrator(
                Repository(db),
                client,
                fallback_to_mock=settings.completion_fallback_to_mock,
            )
            result = orchestrator.generate(
                resume_text=resume_text,
                job_text=job.read_text(encoding="utf-8"),
            )
    except QuillError as exc:
        raise _fail(exc) from exc

    if out_dir is None:
        typer.echo(json.dumps(result.model_dump(), indent=2))
        return

    out_dir.mkdir(parents=True, exist_ok=True)
    resume_path = out_dir / "resume.html"
    cover_path = out_dir / "cover_letter.html"
    resume_path.write_text(result.tailored_resume_html, encoding="utf-8")
    cover_path.write_text(result.cover_letter_html, encoding="utf-8")
    typer.echo(
        json.dumps(
            {"summary": result.summary, "resume": str(resume_path), "cover_letter": str(cover_path)},
            indent=2,
        )
    )


@app.command("redact")
def redact_cmd(file: Path = typer.Option(..., "--file", exists=True, readable=True)) -> None:
    """Redact emails and phone numbers from an HTML file."""
    configure_logging()
    redactor = RedactionOrchestrator(create_completion_client(get_settings()))
    result = redactor.redact(file.read_text(encoding="utf-8"))
    typer.echo(json.dumps(result.model_dump(), indent=2))


@app.command("export-pdf")
def export_pdf_cmd(
    input_file: Path = typer.Argument(..., exists=True, readable=True),
    output: Path | None = typer.Option(None, "--output"),
    title: str | None = typer.Option(None, "--title"),
) -> None:
    """Render an HTML file to PDF."""
    configure_logging()
    settings = get_settings()
    output_path = output or input_file.with_suffix(".pdf")

    try:
        pdf_bytes = render_pdf(
            input_file.read_text(encoding="utf-8"),
            title=title,
            timeout_sec=settings.pdf_render_timeout_sec,
        )
    except QuillError as exc:
        raise _fail(exc) from exc

    output_path.write_bytes(pdf_bytes)
    typer.echo(json.dumps({"output": str(output_path), "size": len(pdf_bytes)}, indent=2))


@versions_app.command("list")
def versions_list(limit: int = typer.Option(20, "--limit")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        versions = _version_service(db).list_versions(limit=limit)
        typer.echo(
            json.dumps(
                [
                    {
                        "id": version.id,
                        "title": version.title,
                        "public_token": version.public_token,
                        "is_public": version.is_public,
                        "views": version.views,
                        "created_at": version.created_at.isoformat() if version.created_at else None,
                    }
                    for version in versions
                ],
                indent=2,
            )
        )


@versions_app.command("delete")
def versions_delete(version_id: str = typer.Option(..., "--id")) -> None:
    configure_logging()
    ensure_initialized()
    with SessionLocal() as db:
        try:
            result = _version_service(db).delete_version(version_id)
        except QuillError as exc:
            raise _fail(exc) from exc
        typer.echo(json.dumps(result.model_dump(), indent=2))


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    configure_logging()
    ensure_initialized()
    settings = get_settings()
    app_instance = create_app(settings)
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
