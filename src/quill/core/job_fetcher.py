from __future__ import annotations

import logging
import re

import requests
from bs4 import BeautifulSoup

from quill.errors import JobFetchError

logger = logging.getLogger(__name__)


USER_AGENT = "Mozilla/5.0 (compatible; QuillBot/1.0; +https://github.com/quill-resume/quill)"
MIN_CONTENT_LENGTH = 100

_TITLE_COMPANY_PATTERN = re.compile(r"^(?P<title>.+?)\s+(?:at|@|-|–|\|)\s+(?P<company>.+)$")


def fetch_job_text(url: str, timeout_sec: int = 30) -> str:
    try:
        response = requests.get(url, timeout=timeout_sec, headers={"User-Agent": USER_AGENT})
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("Failed to fetch job URL %s: %s", url, exc)
        raise JobFetchError(f"Failed to fetch job posting: {exc}") from exc

    soup = BeautifulSoup(response.text, "html.parser")
    for tag in soup(["script", "style", "noscript"]):
        tag.extract()

    text = soup.get_text("\n")
    lines = [" ".join(line.split()) for line in text.splitlines() if line.strip()]
    content = "\n".join(lines)
    if len(content) < MIN_CONTENT_LENGTH:
        raise JobFetchError("Failed to fetch job posting: Could not extract meaningful content from URL")
    return content


def guess_title_and_company(text: str) -> tuple[str | None, str | None]:
    lines = [line.strip() for line in text.splitlines() if line.strip()]
    if not lines:
        return None, None

    first = lines[0][:200]
    match = _TITLE_COMPANY_PATTERN.match(first)
    if match:
        return match.group("title").strip()[:100], match.group("company").strip()[:100]
    return first[:100], None
