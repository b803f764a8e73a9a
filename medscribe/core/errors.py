# -*- coding: utf-8 -*-
"""Error taxonomy for the analysis pipeline and its collaborators."""

from typing import List, Optional

from medscribe.config.constants import MAX_ERROR_DETAILS, MAX_RAW_TEXT_PREVIEW
from medscribe.core.models import ValidationIssue

__all__ = [
    "AnalysisError",
    "InputError",
    "AuthorizationError",
    "NotFoundError",
    "UpstreamApiError",
    "MalformedOutputError",
    "SchemaValidationError",
    "PersistenceError",
    "TranscriptionError",
    "ConfigurationError",
    "truncate",
    "status_for",
]


def truncate(text: Optional[str], limit: int = MAX_ERROR_DETAILS) -> Optional[str]:
    if text is None:
        return None
    return text if len(text) <= limit else text[:limit]


class AnalysisError(Exception):
    """Base class: a short classification plus optional bounded details."""

    error_message = "Action failed"
    status_code = 500

    def __init__(self, details: Optional[str] = None):
        self.details = truncate(details)
        super().__init__(self.error_message if not self.details else f"{self.error_message}: {self.details}")


class InputError(AnalysisError):
    """Empty or missing transcript text."""

    error_message = "Missing prompt"
    status_code = 400


class AuthorizationError(AnalysisError):
    """Caller does not own the patient/session context."""

    error_message = "Unauthorized"
    status_code = 403


class NotFoundError(AnalysisError):
    error_message = "Not found"
    status_code = 404


class UpstreamApiError(AnalysisError):
    """Non-success response (or transport failure) from the completion endpoint."""

    error_message = "API request failed"
    status_code = 502

    def __init__(self, status: Optional[int], body: str = ""):
        self.status = status
        self.body = truncate(body or "")
        prefix = f"HTTP {status}" if status is not None else "transport error"
        super().__init__(f"{prefix}: {self.body}" if self.body else prefix)


class MalformedOutputError(AnalysisError):
    """Completion could not be coerced into parseable JSON."""

    error_message = "Model output not valid JSON"
    status_code = 422

    def __init__(self, raw_text: str):
        self.raw_text = (raw_text or "")[:MAX_RAW_TEXT_PREVIEW]
        super().__init__(self.raw_text)


class SchemaValidationError(AnalysisError):
    """Normalized JSON does not conform to the ClinicalRecord shape."""

    error_message = "Invalid data shape returned by AI"
    status_code = 422

    def __init__(self, issues: List[ValidationIssue]):
        self.issues = list(issues)
        super().__init__("; ".join(str(issue) for issue in self.issues))


class PersistenceError(AnalysisError):
    """A known-good record could not be stored."""

    error_message = "Failed to save session"
    status_code = 500


class ConfigurationError(AnalysisError):
    """A configured value (e.g. the system prompt override) is unusable."""

    error_message = "Invalid configuration"
    status_code = 500


class TranscriptionError(AnalysisError):
    error_message = "Transcription failed"
    status_code = 502


_STATUS_BY_MESSAGE = {
    cls.error_message: cls.status_code
    for cls in (
        InputError,
        AuthorizationError,
        NotFoundError,
        UpstreamApiError,
        MalformedOutputError,
        SchemaValidationError,
        PersistenceError,
        TranscriptionError,
        ConfigurationError,
    )
}


def status_for(error_message: Optional[str]) -> int:
    """HTTP status for an error classification string (200 when there is none)."""
    if error_message is None:
        return 200
    return _STATUS_BY_MESSAGE.get(error_message, AnalysisError.status_code)
