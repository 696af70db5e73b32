from __future__ import annotations

import logging
import re
from collections.abc import Callable

from jinja2 import Environment
from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from quill.db.base import new_id
from quill.errors import InvalidInputError, RenderError, TransportError
from quill.storage.base import EXPORTS_BUCKET, StorageBackend
from quill.types import ExportResult

logger = logging.getLogger(__name__)

PdfRenderer = Callable[..., bytes]

PDF_STYLES = """
  body {
    font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Roboto', sans-serif;
    line-height: 1.6;
    color: #333;
    max-width: 800px;
    margin: 0 auto;
    padding: 20px;
  }
  h1 { font-size: 24px; margin-bottom: 10px; color: #2c3e50; }
  h2 { font-size: 18px; margin-top: 20px; margin-bottom: 8px; color: #34495e; border-bottom: 1px solid #eee; }
  h3 { font-size: 16px; margin-top: 15px; margin-bottom: 5px; color: #34495e; }
  ul { margin: 10px 0; padding-left: 20px; }
  li { margin-bottom: 4px; }
  .section { margin-bottom: 20px; }
  .summary { font-style: italic; margin-bottom: 15px; }
  .cover-letter { margin-top: 30px; }
  @media print {
    body { margin: 0; padding: 15px; }
    .page-break { page-break-before: always; }
  }
"""

PDF_MARGINS = {"top": "20mm", "right": "15mm", "bottom": "20mm", "left": "15mm"}

_DOCUMENT_TEMPLATE = Environment(autoescape=True).from_string(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <title>{{ title }}</title>
  <style>{{ styles|safe }}</style>
</head>
<body>
{{ body|safe }}
</body>
</html>
"""
)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9 ._-]+")


def build_pdf_document(html: str, title: str | None = None) -> str:
    return _DOCUMENT_TEMPLATE.render(title=title or "Resume", styles=PDF_STYLES, body=html)


def render_pdf(html: str, title: str | None = None, timeout_sec: int = 60) -> bytes:
    document = build_pdf_document(html, title)
    timeout_ms = timeout_sec * 1000
    try:
        with sync_playwright() as playwright:
            browser = playwright.chromium.launch(headless=True)
            try:
                page = browser.new_page()
                page.set_default_timeout(timeout_ms)
                page.set_content(document, wait_until="networkidle", timeout=timeout_ms)
                return page.pdf(format="A4", print_background=True, margin=PDF_MARGINS)
            finally:
                browser.close()
    except PlaywrightTimeoutError as exc:
        logger.warning("PDF render timed out after %ss: %s", timeout_sec, exc)
        raise TransportError(f"PDF render timed out after {timeout_sec}s") from exc
    except PlaywrightError as exc:
        logger.warning("PDF render failed: %s", exc)
        raise RenderError(f"Failed to render PDF: {exc}") from exc


def safe_pdf_filename(title: str | None) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", (title or "").strip()).strip(" ._")
    return f"{stem or 'resume'}.pdf"


class PdfExporter:
    def __init__(
        self,
        storage: StorageBackend,
        renderer: PdfRenderer = render_pdf,
        *,
        timeout_sec: int = 60,
        signed_url_ttl_sec: int = 3600,
    ):
        self.storage = storage
        self.renderer = renderer
        self.timeout_sec = timeout_sec
        self.signed_url_ttl_sec = signed_url_ttl_sec

    def export(self, html: str, title: str | None = None) -> ExportResult:
        if not html:
            raise InvalidInputError("HTML content is required")

        pdf_bytes = self.renderer(html, title=title, timeout_sec=self.timeout_sec)
        storage_path = f"{new_id()}.pdf"
        self.storage.upload_file(EXPORTS_BUCKET, storage_path, pdf_bytes, "application/pdf")
        url = self.storage.get_signed_url(EXPORTS_BUCKET, storage_path, self.signed_url_ttl_sec)

        logger.info("PDF exported path=%s bytes=%s", storage_path, len(pdf_bytes))
        return ExportResult(url=url, filename=safe_pdf_filename(title))
