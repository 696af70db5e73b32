from __future__ import annotations

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from quill.api.deps import get_version_service
from quill.core.sharing import VersionService
from quill.errors import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["web"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))


@router.get("/s/{token}", response_class=HTMLResponse)
def shared_version(
    token: str,
    request: Request,
    versions: VersionService = Depends(get_version_service),
) -> HTMLResponse:
    try:
        version = versions.get_by_public_token(token)
    except NotFoundError:
        return templates.TemplateResponse(
            request,
            "not_found.html",
            {"message": "Resume not found or not public"},
            status_code=404,
        )

    return templates.TemplateResponse(
        request,
        "share.html",
        {
            "version": version,
            "resume_html": version.resume_html_redacted or version.resume_html,
            "cover_html": version.cover_html_redacted or version.cover_html,
        },
        headers={"X-Robots-Tag": "noindex, nofollow"},
    )
