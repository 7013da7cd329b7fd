"""Domain error taxonomy for the chat service.

Every failure the orchestrator or its gateways can report is one of these
classes. Each class carries an ``ErrorKind`` tag; the HTTP layer maps the tag
to a status code and returns ``message`` to the client. ``message`` must
therefore always be safe to show: raw provider or database detail belongs in
the exception chain (``raise ... from exc``) and in the logs, never here.
"""

from enum import StrEnum
from typing import Any, ClassVar


class ErrorKind(StrEnum):
    """Stable identifiers for each failure variant."""

    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UPSTREAM_AUTH = "upstream_auth"
    UPSTREAM_BUSY = "upstream_busy"
    UPSTREAM_TIMEOUT = "upstream_timeout"
    EMPTY_REPLY = "empty_reply"
    UPSTREAM = "upstream"
    STORAGE_REFERENCE = "storage_reference"
    STORAGE_CONFLICT = "storage_conflict"
    STORAGE_UNAVAILABLE = "storage_unavailable"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


class ChatError(Exception):
    """Base exception for the chat service."""

    kind: ClassVar[ErrorKind] = ErrorKind.INTERNAL
    default_message: ClassVar[str] = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None, details: dict[str, Any] | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    @property
    def error_kind(self) -> ErrorKind:
        """Kind of this particular error instance."""
        return self.kind

    @property
    def retryable(self) -> bool:
        """Whether resubmitting the same request may succeed."""
        return self.error_kind in {
            ErrorKind.UPSTREAM_BUSY,
            ErrorKind.UPSTREAM_TIMEOUT,
            ErrorKind.STORAGE_UNAVAILABLE,
        }


class ValidationError(ChatError):
    """Raised when client input is missing, malformed or oversized."""

    kind = ErrorKind.VALIDATION
    default_message = "Invalid request"


class NotFoundError(ChatError):
    """Raised when a referenced conversation does not exist."""

    kind = ErrorKind.NOT_FOUND
    default_message = "Conversation not found"

    def __init__(self, resource: str, identifier: str, message: str | None = None):
        super().__init__(
            message or f"{resource} not found",
            {"resource": resource, "identifier": identifier},
        )


class UpstreamError(ChatError):
    """Raised for provider failures that have no more specific variant."""

    kind = ErrorKind.UPSTREAM
    default_message = "Unable to generate response. Please try again."


class UpstreamAuthError(UpstreamError):
    """Raised when the provider rejects our credentials."""

    kind = ErrorKind.UPSTREAM_AUTH
    default_message = "AI service authentication failed. Please contact support."


class UpstreamBusyError(UpstreamError):
    """Raised when the provider is rate limiting us or failing transiently."""

    kind = ErrorKind.UPSTREAM_BUSY
    default_message = "AI service is temporarily busy. Please try again in a moment."


class UpstreamTimeoutError(UpstreamError):
    """Raised when the provider does not answer within the allotted time."""

    kind = ErrorKind.UPSTREAM_TIMEOUT
    default_message = "AI response timed out. Please try again."


class EmptyReplyError(UpstreamError):
    """Raised when the provider answers without any usable text."""

    kind = ErrorKind.EMPTY_REPLY
    default_message = "AI service returned an empty response. Please try again."


class StorageError(ChatError):
    """Base class for persistence failures."""

    kind = ErrorKind.INTERNAL


class StorageConstraintError(StorageError):
    """Raised when a write violates a database constraint.

    ``violation`` is either ``"reference"`` (a foreign key points nowhere) or
    ``"conflict"`` (a unique key already exists).
    """

    REFERENCE: ClassVar[str] = "reference"
    CONFLICT: ClassVar[str] = "conflict"

    def __init__(self, violation: str, message: str | None = None, details: dict[str, Any] | None = None):
        if violation not in (self.REFERENCE, self.CONFLICT):
            raise ValueError(f"Unknown constraint violation: {violation}")
        self.violation = violation
        if message is None:
            message = "Referenced resource not found" if violation == self.REFERENCE else "Resource already exists"
        super().__init__(message, details)

    @property
    def error_kind(self) -> ErrorKind:
        if self.violation == self.REFERENCE:
            return ErrorKind.STORAGE_REFERENCE
        return ErrorKind.STORAGE_CONFLICT


class StorageUnavailableError(StorageError):
    """Raised when the database cannot be reached or the pool is exhausted."""

    kind = ErrorKind.STORAGE_UNAVAILABLE
    default_message = "Database temporarily unavailable"


class ConfigurationError(ChatError):
    """Raised at startup when required settings are missing or invalid."""

    kind = ErrorKind.CONFIGURATION
    default_message = "Service is misconfigured"
