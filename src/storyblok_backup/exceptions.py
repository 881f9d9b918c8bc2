"""Exception hierarchy for storyblok-backup.

All errors raised by the client, the backup orchestrator and the restore
dispatcher derive from StoryblokBackupError so callers (and the CLI) can
catch a single base class. Nothing in this package recovers from these
errors locally: every one of them aborts the current run.
"""

from typing import Any


class StoryblokBackupError(Exception):
    """Base exception for all storyblok-backup errors.

    Attributes:
        message: Human-readable error message
        details: Additional error context (response body, offending path, ...)
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigurationError(StoryblokBackupError):
    """Missing credentials or identifiers, or an invalid enumerated option."""


class UnknownResourceTypeError(StoryblokBackupError):
    """A resource type name is not part of the relevant catalog."""


class OutputConflictError(StoryblokBackupError):
    """A directory or file already exists where exclusivity is required."""


class InvalidInputFileError(StoryblokBackupError):
    """A restore input file is missing, malformed or has the wrong shape."""


class UnsupportedOperationError(StoryblokBackupError):
    """The requested operation is not supported for this resource type."""


class MissingDatasourceIdError(StoryblokBackupError):
    """Creating datasource entries requires the id of the parent datasource."""


# Upstream API failures


class ApiError(StoryblokBackupError):
    """Any failure of a Management API call.

    Attributes:
        status_code: HTTP status code, if the server answered at all
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code


class AuthenticationError(ApiError):
    """The OAuth token was rejected (HTTP 401)."""


class AuthorizationError(ApiError):
    """The token lacks permission for the space or resource (HTTP 403)."""


class NotFoundError(ApiError):
    """Resource or space does not exist (HTTP 404)."""


class ValidationError(ApiError):
    """The API refused the payload (HTTP 400/422)."""


class RateLimitError(ApiError):
    """Too many requests (HTTP 429).

    Attributes:
        retry_after: Seconds to wait before retrying, when the server said so
    """

    def __init__(
        self,
        message: str,
        retry_after: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, status_code=429, details=details)
        self.retry_after = retry_after


class ServerError(ApiError):
    """The API failed with a 5xx status."""


class ApiConnectionError(ApiError):
    """The API host could not be reached."""


class ApiTimeoutError(ApiError):
    """The request did not complete within the configured timeout."""


class FormatError(ApiError):
    """The API answered with a body that is not JSON."""
