from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import openai
import requests
from openai import OpenAI

from quill.config import Settings
from quill.core.redaction import regex_redact
from quill.errors import (
    ApiError,
    CompletionError,
    CredentialModeNotImplementedError,
    ForbiddenError,
    MalformedResponseError,
    ModelNotFoundError,
    NoCredentialsError,
    RateLimitedError,
    SafetyBlockedError,
    TransportError,
)
from quill.llm.prompts import (
    COVER_LETTER_TASK_MARKER,
    REDACTION_TASK_MARKER,
    RESUME_TASK_MARKER,
    extract_redaction_payload,
)
from quill.types import CompletionOptions

logger = logging.getLogger(__name__)

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"


class CompletionClient(Protocol):
    name: str

    def generate_completion(self, prompt: str, options: CompletionOptions | None = None) -> str: ...


@dataclass(slots=True)
class CompletionConfig:
    provider: str
    api_key: str
    model: str
    base_url: str
    timeout_sec: int
    service_account_path: str = ""

    @classmethod
    def from_settings(cls, settings: Settings) -> CompletionConfig:
        if settings.completion_provider == "openai":
            return cls(
                provider="openai",
                api_key=settings.openai_api_key,
                model=settings.openai_model,
                base_url=settings.openai_base_url,
                timeout_sec=settings.completion_timeout_sec,
            )
        return cls(
            provider=settings.completion_provider,
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            base_url=settings.gemini_base_url,
            timeout_sec=settings.completion_timeout_sec,
            service_account_path=settings.google_application_credentials,
        )


class GeminiCompletionClient:
    name = "gemini"

    def __init__(self, config: CompletionConfig, http: requests.Session | None = None):
        self.config = config
        self.http = http or requests.Session()

    def generate_completion(self, prompt: str, options: CompletionOptions | None = None) -> str:
        options = options or CompletionOptions()
        model = options.model or self.config.model or DEFAULT_GEMINI_MODEL

        if not self.config.api_key:
            if self.config.service_account_path:
                raise CredentialModeNotImplementedError()
            raise NoCredentialsError()

        url = f"{self.config.base_url.rstrip('/')}/models/{model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": options.max_tokens,
                "temperature": options.temperature,
            },
        }

        try:
            response = self.http.post(
                url,
                json=body,
                headers={"Content-Type": "application/json", "x-goog-api-key": self.config.api_key},
                timeout=float(self.config.timeout_sec),
            )
            if not response.ok:
                logger.error(
                    "Completion API error model=%s status=%s reason=%s body=%s",
                    model,
                    response.status_code,
                    response.reason,
                    response.text[:500],
                )
                raise classify_status(response.status_code, response.reason or "", model=model)
            return extract_completion_text(response.json())
        except CompletionError:
            raise
        except Exception as exc:
            logger.warning("Completion transport failure model=%s: %s", model, exc)
            raise TransportError(f"Failed to generate completion with Gemini: {exc}") from exc


def classify_status(status: int, status_text: str, *, model: str) -> ApiError:
    if status == 404:
        return ModelNotFoundError(model, status_text or "Not Found")
    if status == 403:
        return ForbiddenError(status_text or "Forbidden")
    if status == 429:
        return RateLimitedError(status_text or "Too Many Requests")
    return ApiError(status, status_text)


def extract_completion_text(data: Any) -> str:
    if not isinstance(data, dict):
        raise MalformedResponseError()

    candidates = data.get("candidates") or []
    if candidates and isinstance(candidates[0], dict):
        candidate = candidates[0]
        if candidate.get("finishReason") == "SAFETY":
            raise SafetyBlockedError()

        content = candidate.get("content")
        if isinstance(content, dict):
            parts = content.get("parts") or []
            text = "".join(
                str(part.get("text") or "") for part in parts if isinstance(part, dict)
            )
            if text:
                return text
        elif isinstance(content, str) and content:
            return content

        for key in ("text", "output"):
            value = candidate.get(key)
            if isinstance(value, str) and value:
                return value

    error = data.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise MalformedResponseError(f"Completion API returned error: {message or 'Unknown error'}")

    logger.error("Unexpected completion response keys=%s", sorted(data.keys()))
    raise MalformedResponseError()


class OpenAICompletionClient:
    name = "openai"

    def __init__(self, config: CompletionConfig):
        self.config = config
        self.client = OpenAI(
            base_url=config.base_url,
            api_key=config.api_key or "missing",
            timeout=float(config.timeout_sec),
            max_retries=0,
        )

    def generate_completion(self, prompt: str, options: CompletionOptions | None = None) -> str:
        options = options or CompletionOptions()
        model = options.model or self.config.model or DEFAULT_OPENAI_MODEL
        if not self.config.api_key:
            raise NoCredentialsError("No OpenAI credentials configured. Please set OPENAI_API_KEY.")

        try:
            response = self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                max_tokens=options.max_tokens,
                temperature=options.temperature,
            )
        except openai.NotFoundError as exc:
            raise ModelNotFoundError(model) from exc
        except openai.PermissionDeniedError as exc:
            raise ForbiddenError() from exc
        except openai.RateLimitError as exc:
            raise RateLimitedError() from exc
        except openai.APIStatusError as exc:
            raise ApiError(exc.status_code, str(exc.message)) from exc
        except Exception as exc:
            logger.warning("OpenAI-compatible transport failure model=%s: %s", model, exc)
            raise TransportError(f"Failed to generate completion with OpenAI: {exc}") from exc

        return self._extract_chat_text(response)

    @staticmethod
    def _extract_chat_text(response: Any) -> str:
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise MalformedResponseError()

        choice = choices[0]
        if getattr(choice, "finish_reason", None) == "content_filter":
            raise SafetyBlockedError()

        message = getattr(choice, "message", None)
        content = getattr(message, "content", None) if message is not None else None
        if isinstance(content, str) and content:
            return content
        raise MalformedResponseError()


MOCK_RESUME_HTML = """<div class="resume">
  <h1>Jordan Candidate</h1>
  <div class="summary">
    <p>Software engineer with hands-on experience building backend services and APIs.</p>
  </div>
  <div class="section">
    <h2>Experience</h2>
    <h3>Software Engineer</h3>
    <ul>
      <li>Developed scalable backend APIs with Python and FastAPI</li>
      <li>Designed relational schemas and tuned slow queries</li>
      <li>Shipped features behind CI/CD pipelines with automated tests</li>
    </ul>
  </div>
  <div class="section">
    <h2>Skills</h2>
    <ul>
      <li>Languages: Python, SQL, TypeScript</li>
      <li>Platforms: PostgreSQL, Docker, AWS</li>
    </ul>
  </div>
</div>"""

MOCK_COVER_LETTER_HTML = """<div class="cover-letter">
  <p>Dear Hiring Manager,</p>
  <p>I am excited to apply for this role. The position matches the backend and API work I enjoy most.</p>
  <p>In my recent work I built and maintained production services, partnered with product teams, and kept systems reliable as they grew.</p>
  <p>I would welcome the chance to discuss how my experience can support your team. Thank you for your consideration.</p>
  <p>Sincerely,<br>Jordan Candidate</p>
</div>"""

MOCK_GENERIC_RESPONSE = "Mock completion response"


def mock_generate_completion(prompt: str, options: CompletionOptions | None = None) -> str:
    if REDACTION_TASK_MARKER in prompt:
        return regex_redact(extract_redaction_payload(prompt))
    if RESUME_TASK_MARKER in prompt:
        return MOCK_RESUME_HTML
    if COVER_LETTER_TASK_MARKER in prompt:
        return MOCK_COVER_LETTER_HTML
    return MOCK_GENERIC_RESPONSE


class MockCompletionClient:
    name = "mock"

    def generate_completion(self, prompt: str, options: CompletionOptions | None = None) -> str:
        return mock_generate_completion(prompt, options)


def create_completion_client(settings: Settings) -> CompletionClient:
    config = CompletionConfig.from_settings(settings)
    if config.provider == "mock":
        return MockCompletionClient()
    if config.provider == "openai":
        return OpenAICompletionClient(config)
    return GeminiCompletionClient(config)
