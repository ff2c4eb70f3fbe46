"""Error taxonomy for the transcription pipeline and study endpoints."""

from __future__ import annotations

from typing import Any


class StudyReflectError(Exception):
    """
    Base class for errors rendered as JSON at the endpoint boundary.

    The response body is ``{"error": ..., "message"?: ..., "details"?: ...}``
    plus any ``extra`` fields.
    """

    status_code: int = 500
    error: str = "Error processing file"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: str | None = None,
        extra: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        self.extra = extra or {}
        super().__init__(message or details or self.error)

    def to_payload(self) -> dict[str, Any]:
        body: dict[str, Any] = {"error": self.error}
        if self.message:
            body["message"] = self.message
        if self.details:
            body["details"] = self.details
        body.update(self.extra)
        return body


class NoFileProvided(StudyReflectError):
    """Raised when the multipart request has no ``file`` part."""

    status_code = 400
    error = "No file uploaded"


class PayloadTooLarge(StudyReflectError):
    """Raised when an upload exceeds the configured limit."""

    status_code = 413
    error = "File too large"

    def __init__(self, max_size: str, message: str | None = None):
        self.max_size = max_size
        super().__init__(
            message
            or (
                f"Please upload a file smaller than {max_size}. "
                "For larger files, consider compressing the video/audio first."
            ),
            extra={"maxSize": max_size},
        )


class UnsupportedFormat(StudyReflectError):
    """Raised when a filename's extension is not on the allow-list."""

    status_code = 400
    error = "Unsupported file type"

    def __init__(self, filename: str, message: str = "Please upload audio or video files."):
        self.filename = filename
        super().__init__(message)


class InvalidResponse(StudyReflectError):
    """Raised when a question response is missing its content."""

    status_code = 400
    error = "Invalid response"


class TranscodeFailure(StudyReflectError):
    """Raised when ffmpeg cannot extract or compress audio."""

    def __init__(self, operation: str, details: str | None = None):
        self.operation = operation
        super().__init__(details=details or f"ffmpeg {operation} failed")


class TranscriptionServiceFailure(StudyReflectError):
    """Raised when the speech-to-text backend rejects or fails a request."""

    def __init__(self, details: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(details=details)


class InternalError(StudyReflectError):
    """Catch-all for unexpected failures while handling a request."""
