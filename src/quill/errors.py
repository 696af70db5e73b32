"""
Error taxonomy shared by services and the HTTP layer.

Every error carries the HTTP status the API answers with; the message is
returned verbatim as the ``error`` field of the JSON body.
"""
from __future__ import annotations


class QuillError(Exception):
    """Base application error."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class InvalidInputError(QuillError):
    status_code = 400
    default_message = "Invalid request"


class MissingResumeError(InvalidInputError):
    default_message = "Either fileId or resumeText must be provided"


class MissingJobError(InvalidInputError):
    default_message = "Either jobId or jobText must be provided"


class UnsupportedFileTypeError(InvalidInputError):
    default_message = "Invalid file type. Only PDF, DOCX, DOC, and TXT files are allowed."


class NotFoundError(QuillError):
    status_code = 404
    default_message = "Resource not found"


class MethodNotAllowedError(QuillError):
    status_code = 405
    default_message = "Method not allowed"


class PersistenceError(QuillError):
    default_message = "Failed to persist record"


class StorageError(QuillError):
    default_message = "Storage operation failed"


class ExtractionError(QuillError):
    default_message = "Failed to extract text from file"


class JobFetchError(QuillError):
    default_message = "Failed to fetch job posting"


class RenderError(QuillError):
    default_message = "Failed to render PDF"


class CompletionError(QuillError):
    """Failure reported by a completion backend."""

    default_message = "Completion request failed"


class NoCredentialsError(CompletionError):
    default_message = (
        "No Gemini credentials configured. Please set the GEMINI_API_KEY environment variable."
    )


class CredentialModeNotImplementedError(CompletionError):
    default_message = (
        "Service account authentication not implemented. "
        "Please set GEMINI_API_KEY for REST API access."
    )


class ApiError(CompletionError):
    def __init__(self, status: int, status_text: str = "", message: str | None = None):
        self.status = status
        self.status_text = status_text
        super().__init__(message or f"Completion API error: {status} {status_text}".rstrip())


class ModelNotFoundError(ApiError):
    def __init__(self, model: str, status_text: str = "Not Found"):
        self.model = model
        super().__init__(
            404,
            status_text,
            f'Completion API endpoint not found. Check if model "{model}" is correct and API key is valid.',
        )


class ForbiddenError(ApiError):
    def __init__(self, status_text: str = "Forbidden"):
        super().__init__(403, status_text, "Completion API access forbidden. Check your API key permissions.")


class RateLimitedError(ApiError):
    status_code = 429

    def __init__(self, status_text: str = "Too Many Requests"):
        super().__init__(429, status_text, "Completion API rate limit exceeded. Please try again later.")


class SafetyBlockedError(CompletionError):
    status_code = 400
    default_message = "Content generation was blocked due to safety filters"


class MalformedResponseError(CompletionError):
    default_message = "Unexpected response format from completion API"


class TransportError(CompletionError):
    default_message = "Failed to reach completion API"
