from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from quill.llm.prompts import (
    ADDRESS_PLACEHOLDER,
    EMAIL_PLACEHOLDER,
    PHONE_PLACEHOLDER,
    build_redaction_prompt,
)
from quill.types import CompletionOptions, RedactionOptions, RedactionResult

if TYPE_CHECKING:
    from quill.llm.providers import CompletionClient

logger = logging.getLogger(__name__)

REDACTION_COMPLETION = CompletionOptions(max_tokens=2048, temperature=0.1)

_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
# International forms first so the country code is consumed with the number.
_PHONE_PATTERNS = (
    re.compile(r"(?<![\w+])\+\d{1,3}[-.\s]?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"(?<!\w)\(\d{3}\)\s*\d{3}[-.\s]?\d{4}\b"),
    re.compile(r"\b\d{3}[-.]?\d{3}[-.]?\d{4}\b"),
)
_ADDRESS_PATTERN = re.compile(
    r"\b\d+\s+[A-Za-z\s]+(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Lane|Ln|Boulevard|Blvd)\b",
    re.IGNORECASE,
)


def regex_redact(html: str, options: RedactionOptions | None = None) -> str:
    options = options or RedactionOptions()
    redacted = html

    if options.redact_emails:
        redacted = _EMAIL_PATTERN.sub(EMAIL_PLACEHOLDER, redacted)

    if options.redact_phones:
        for pattern in _PHONE_PATTERNS:
            redacted = pattern.sub(PHONE_PLACEHOLDER, redacted)

    if options.redact_addresses:
        redacted = redact_addresses(redacted)

    return redacted


def redact_addresses(html: str) -> str:
    return _ADDRESS_PATTERN.sub(ADDRESS_PLACEHOLDER, html)


class RedactionOrchestrator:
    def __init__(self, client: CompletionClient):
        self.client = client

    def redact(self, html: str, options: RedactionOptions | None = None) -> RedactionResult:
        options = options or RedactionOptions()
        try:
            redacted = self.client.generate_completion(build_redaction_prompt(html), REDACTION_COMPLETION)
            if not redacted.strip():
                raise ValueError("empty redaction output")
        except Exception as exc:
            logger.warning("AI redaction failed, falling back to regex: %s", exc)
            return RedactionResult(redacted_html=regex_redact(html, options), method="regex")

        if options.redact_addresses:
            redacted = redact_addresses(redacted)
        logger.info("AI redaction completed client=%s", getattr(self.client, "name", "unknown"))
        return RedactionResult(redacted_html=redacted, method="ai")
