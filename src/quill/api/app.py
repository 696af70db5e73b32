from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quill.api.routes import router as api_router
from quill.config import Settings, get_settings
from quill.core.pdf import PdfRenderer, render_pdf
from quill.db.init import init_database
from quill.errors import MethodNotAllowedError, QuillError
from quill.llm.providers import CompletionClient, create_completion_client
from quill.logging_config import configure_logging
from quill.storage.base import StorageBackend
from quill.storage.factory import create_storage
from quill.web.routes import router as web_router

logger = logging.getLogger(__name__)


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def create_app(
    settings: Settings | None = None,
    *,
    completion_client: CompletionClient | None = None,
    storage: StorageBackend | None = None,
    pdf_renderer: PdfRenderer | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.completion_client = completion_client or create_completion_client(settings)
    app.state.storage = storage or create_storage(settings)
    app.state.pdf_renderer = pdf_renderer or render_pdf

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def _startup() -> None:
        init_database()
        logger.info(
            "Quill started env=%s completion=%s storage=%s",
            settings.app_env,
            app.state.completion_client.name,
            app.state.storage.name,
        )

    @app.exception_handler(QuillError)
    def _quill_error(request: Request, exc: QuillError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == 405:
            return _error_response(405, MethodNotAllowedError.default_message)
        return _error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error_response(400, message)

    @app.exception_handler(Exception)
    def _unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(500, str(exc) or "Internal server error")

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    app.include_router(api_router)
    if settings.web_ui_enabled:
        app.include_router(web_router)

    return app
