"""Client-specific exceptions."""

from __future__ import annotations

from typing import Any, Mapping


class ApifyClientError(Exception):
    """Base exception for all Apify client failures."""

    default_type = "client-error"

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        error_type: str | None = None,
        body: object = None,
        headers: Mapping[str, str] | None = None,
        details: Mapping[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_type = error_type or self.default_type
        self.body = body
        self.headers = dict(headers) if headers is not None else {}
        self.details = dict(details) if details is not None else {}
        self.cause = cause

    def __str__(self) -> str:
        if self.status_code is None:
            return str(self.args[0])
        return f"{self.status_code} {self.error_type}: {self.args[0]}"


class ApifyValidationError(ApifyClientError):
    """Raised before any network activity when call arguments are unusable."""

    default_type = "invalid-parameter"

    def __init__(self, message: str, *, parameter: str | None = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.parameter = parameter


class MissingParameterError(ApifyValidationError):
    """Raised when a required argument is absent."""

    default_type = "missing-parameter"


class InvalidParameterTypeError(ApifyValidationError):
    """Raised when an argument is present but has the wrong shape or type."""

    default_type = "invalid-parameter-type"


class ConflictingParametersError(ApifyValidationError):
    """Raised when mutually exclusive arguments are supplied together."""

    default_type = "conflicting-parameters"


class ApifyApiError(ApifyClientError):
    """Raised for non-retryable HTTP error responses."""

    default_type = "api-error"


class RequestFailedError(ApifyApiError):
    """Raised when a transient failure persisted through every retry."""

    default_type = "request-failed"

    def __init__(self, message: str, *, attempt: int, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.attempt = attempt


class InvalidResponseError(ApifyClientError):
    """Raised when a response body cannot be decoded per its content type."""

    default_type = "invalid-response"
