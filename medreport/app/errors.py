"""Error taxonomy for the analysis and export pipelines."""

from __future__ import annotations

from typing import Optional


class AnalysisError(Exception):
    """Base class for failures of a single analysis."""

    code = "analysis_error"
    user_message = "An error occurred while analyzing the medical report."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)
        self.message = message or self.user_message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "detail": self.user_message}


class InvalidInputError(AnalysisError):
    """The uploaded file cannot be analyzed. Raised before any network call."""

    code = "invalid_input"
    user_message = "Only image files are supported for analysis."


class ServiceError(AnalysisError):
    """The inference service rejected the request or answered without content."""

    code = "service_error"
    user_message = "An error occurred while analyzing the medical report."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> dict:
        data = super().to_dict()
        if self.status_code is not None:
            data["status_code"] = self.status_code
        return data


class NetworkError(ServiceError):
    """The inference service could not be reached."""

    code = "network_error"
    user_message = "Could not reach the analysis service."


class MalformedOutputError(AnalysisError):
    """The service replied, but the content failed structural validation."""

    code = "malformed_output"
    user_message = (
        "Failed to get a valid analysis from the AI. "
        "The response was not in the expected format."
    )


class MalformedJSON(MalformedOutputError):
    """The response text is not a single bare JSON object."""

    code = "malformed_json"


class SchemaViolation(MalformedOutputError):
    """The response JSON does not match the response schema."""

    code = "schema_violation"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field}: {reason}")
        self.field = field
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["field"] = self.field
        return data


class ExportError(Exception):
    """A recoverable failure of one export action."""

    NOT_READY = "not_ready"
    BUSY = "busy"
    CAPTURE_FAILED = "capture_failed"
    ENCODING_FAILED = "encoding_failed"

    def __init__(self, kind: str, reason: str, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.reason = reason
        self.message = message

    def to_dict(self) -> dict:
        return {"code": "export_error", "kind": self.kind, "reason": self.reason, "message": self.message}
