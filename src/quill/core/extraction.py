from __future__ import annotations

import logging
import mimetypes
from io import BytesIO

from docx import Document
from pypdf import PdfReader

from quill.errors import ExtractionError, UnsupportedFileTypeError

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DOC_MIME = "application/msword"
TEXT_MIME = "text/plain"

ALLOWED_MIME_TYPES = frozenset({PDF_MIME, DOCX_MIME, DOC_MIME, TEXT_MIME})

_EXTENSION_MIME = {
    ".pdf": PDF_MIME,
    ".docx": DOCX_MIME,
    ".doc": DOC_MIME,
    ".txt": TEXT_MIME,
}


def resolve_mime_type(content_type: str | None, filename: str | None = None) -> str:
    """Normalize an upload's content type, guessing from the filename when the client sent none."""
    mime = (content_type or "").split(";")[0].strip().lower()
    if mime and mime != "application/octet-stream":
        return mime
    if filename:
        suffix = "." + filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
        guessed = _EXTENSION_MIME.get(suffix) or mimetypes.guess_type(filename)[0]
        if guessed:
            return guessed
    return mime


def extract_text(data: bytes, mime_type: str) -> str:
    if mime_type not in ALLOWED_MIME_TYPES:
        raise UnsupportedFileTypeError()

    try:
        if mime_type == PDF_MIME:
            reader = PdfReader(BytesIO(data))
            return "\n".join(page.extract_text() or "" for page in reader.pages)
        if mime_type in {DOCX_MIME, DOC_MIME}:
            # python-docx only reads OOXML; legacy binary .doc uploads fail here.
            document = Document(BytesIO(data))
            return "\n".join(paragraph.text for paragraph in document.paragraphs)
        return data.decode("utf-8", errors="replace")
    except Exception as exc:
        logger.warning("Text extraction failed mime=%s: %s", mime_type, exc)
        raise ExtractionError() from exc
