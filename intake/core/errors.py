"""Error Hierarchy: typed, categorized exceptions for all intake failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error carries the HTTP status the API layer answers with
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with IntakeError base: FastAPI global handler catches all (ADR: uniform error shape)
    - PayloadTooLargeError subclasses MalformedStreamError: the upload validator
      treats both as a transport failure, only the status code differs
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    TRANSPORT = "transport"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    submission_id: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class IntakeError(Exception):
    """Base exception for all intake errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "submission_id": self.context.submission_id,
                    "field": self.context.field_name,
                },
            }
        }


# ─── Submission Errors ──────────────────────────────────────────

class SubmissionValidationError(IntakeError):
    """Submission metadata violates the name/height constraints."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.field_name = field
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx, 400,
        )
        self.field = field


class SubmissionNotFoundError(IntakeError):
    """Submission id is not present in the registry."""
    def __init__(self, submission_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.submission_id = submission_id
        super().__init__(
            f"Submission '{submission_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.submission_id = submission_id


class SubmissionAlreadyBoundError(IntakeError):
    """Submission already has a file bound to it."""
    def __init__(self, submission_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.submission_id = submission_id
        super().__init__(
            f"Upload ID {submission_id} already has a file",
            "ALREADY_BOUND", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.submission_id = submission_id


# ─── Upload Errors ──────────────────────────────────────────────

class UnknownUploadIdError(IntakeError):
    """Upload targets an id that was never registered."""
    def __init__(self, submission_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.submission_id = submission_id
        super().__init__(
            f"Unknown upload ID {submission_id}",
            "UNKNOWN_UPLOAD_ID", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 400,
        )


class InvalidPayloadError(IntakeError):
    """Multipart stream closed without a single valid file part."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Sent invalid payload",
            "INVALID_PAYLOAD", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 422,
        )


class MalformedStreamError(IntakeError):
    """Multipart framing or transport failure."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        code: str = "MALFORMED_STREAM",
        http_status: int = 400,
    ):
        super().__init__(
            message, code, ErrorCategory.TRANSPORT,
            ErrorSeverity.WARNING, context, http_status,
        )


class PayloadTooLargeError(MalformedStreamError):
    """Request body exceeded the configured upload limit."""
    def __init__(self, max_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"Payload content length greater than maximum allowed: {max_bytes}",
            context, "PAYLOAD_TOO_LARGE", 413,
        )
        self.max_bytes = max_bytes


class UnsupportedMediaTypeError(IntakeError):
    """Upload request body is not multipart/form-data."""
    def __init__(self, media_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"Unsupported Media Type: {media_type or 'none'}",
            "UNSUPPORTED_MEDIA_TYPE", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 415,
        )
        self.media_type = media_type
