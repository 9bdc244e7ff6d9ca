"""
Error taxonomy shared by the generative clients and the studio pages.

Every failure raised by a client derives from StudioError. Provider failures
are translated once, at the client boundary, into UpstreamError subclasses
that carry a machine-checkable ErrorKind instead of relying on the wording
of the provider message.
"""

from __future__ import annotations

from enum import Enum

import httpx
from google.genai import errors as genai_errors


class ErrorKind(str, Enum):
    AUTH_INVALID = "auth_invalid"
    NOT_FOUND = "not_found"
    QUOTA_EXHAUSTED = "quota_exhausted"
    REQUEST_REJECTED = "request_rejected"
    UNAVAILABLE = "unavailable"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


class StudioError(Exception):
    """Base error for every studio client failure."""


class MissingInputError(StudioError, ValueError):
    """Raised before any network call when a required input is absent."""


class EncodingError(StudioError):
    """Raised when a media source cannot be read or decoded."""


class MediaTooLargeError(EncodingError):
    def __init__(self, size_bytes: int, limit_bytes: int) -> None:
        self.size_bytes = size_bytes
        self.limit_bytes = limit_bytes
        super().__init__(
            f"Media exceeds size limit: {size_bytes} bytes (limit {limit_bytes})"
        )


class UpstreamError(StudioError):
    """Failure reported by, or while talking to, the model provider."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNKNOWN,
        status_code: int | None = None,
    ) -> None:
        self.message = message
        self.kind = kind
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.kind is ErrorKind.AUTH_INVALID

    @classmethod
    def from_exception(
        cls,
        error: Exception,
        not_found_is_auth: bool = False,
    ) -> "UpstreamError":
        """Translate an SDK or transport exception into this error type."""
        if isinstance(error, genai_errors.APIError):
            return cls(
                message=error.message or str(error),
                kind=classify_status_code(error.code, not_found_is_auth),
                status_code=error.code,
            )
        if isinstance(error, httpx.HTTPStatusError):
            code = error.response.status_code
            return cls(
                message=str(error),
                kind=classify_status_code(code, not_found_is_auth),
                status_code=code,
            )
        if isinstance(error, httpx.HTTPError):
            return cls(message=str(error) or type(error).__name__, kind=ErrorKind.TRANSPORT)
        return cls(message=str(error) or type(error).__name__)


class NoImageReturnedError(StudioError):
    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__("No image data found in the response")


class SubmissionError(UpstreamError):
    """The video generation job could not be submitted."""


class PollingTransportError(UpstreamError):
    """A status check for a submitted job failed."""


class DownloadError(UpstreamError):
    """The finished video could not be fetched."""


class NoResultURIError(StudioError):
    def __init__(self, job_name: str, reason: str | None = None) -> None:
        self.job_name = job_name
        self.reason = reason
        message = "Video generation failed or no URI returned."
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class PollingTimeoutError(StudioError):
    def __init__(self, job_name: str, timeout_seconds: float, status_checks: int) -> None:
        self.job_name = job_name
        self.timeout_seconds = timeout_seconds
        self.status_checks = status_checks
        super().__init__(
            f"Video generation did not finish within {timeout_seconds:g} seconds "
            f"({status_checks} status checks)"
        )


class GenerationCancelledError(StudioError):
    def __init__(self, job_name: str | None) -> None:
        self.job_name = job_name
        super().__init__("Video generation was cancelled")


def classify_status_code(code: int | None, not_found_is_auth: bool = False) -> ErrorKind:
    if code is None:
        return ErrorKind.UNKNOWN
    if code in (401, 403):
        return ErrorKind.AUTH_INVALID
    if code == 404:
        return ErrorKind.AUTH_INVALID if not_found_is_auth else ErrorKind.NOT_FOUND
    if code == 429:
        return ErrorKind.QUOTA_EXHAUSTED
    if code >= 500:
        return ErrorKind.UNAVAILABLE
    if code >= 400:
        return ErrorKind.REQUEST_REJECTED
    return ErrorKind.UNKNOWN
