"""Error Hierarchy — typed, categorized exceptions for every donor-backend failure mode.

Invariants:
    - Every error has a kind (taxonomy name), code (str), category, severity and HTTP status
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope: success flag, message, error block, field errors
    - UnexpectedError detail only leaves the process when expose_detail=True

Design Decisions:
    - Single hierarchy with HundiError base: FastAPI global handler catches all (uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - ErrorKind enum mirrors the public taxonomy so callers branch on kind, never on class names
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Public error taxonomy — every failure maps to exactly one kind."""
    VALIDATION_FAILED = "ValidationFailed"
    DUPLICATE_KEY = "DuplicateKey"
    NOT_FOUND = "NotFound"
    INVALID_ID_FORMAT = "InvalidIdFormat"
    DEPENDENCY_INIT_FAILED = "DependencyInitFailed"
    MISSING_DEFAULT_GROUP = "MissingDefaultGroup"
    INVALID_TRANSITION = "InvalidTransition"
    HAS_DEPENDENT_RECORDS = "HasDependentRecords"
    UNEXPECTED = "Unexpected"


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
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class FieldError:
    """One field-level validation failure."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    operation: str | None = None


class HundiError(Exception):
    """Base exception for all donor-backend errors."""

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        errors: list[FieldError] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.errors = errors or []

    def to_response(self, expose_detail: bool = False) -> dict:
        """Convert to standardized REST error envelope."""
        body: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error": {
                "kind": self.kind.value,
                "code": self.code,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            },
        }
        if self.errors:
            body["errors"] = [e.to_dict() for e in self.errors]
        return body


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationFailedError(HundiError):
    """Input failed field-level validation."""
    def __init__(
        self, errors: list[FieldError], message: str = "Validation failed",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, ErrorKind.VALIDATION_FAILED, "VALIDATION_ERROR",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400, errors,
        )


class DuplicateKeyError(HundiError):
    """A donor with the same hundi number already exists."""
    def __init__(self, hundi_no: str, context: ErrorContext | None = None):
        super().__init__(
            "A donor with this hundi number already exists",
            ErrorKind.DUPLICATE_KEY, "DUPLICATE_HUNDI_NO",
            ErrorCategory.CONFLICT, ErrorSeverity.ERROR, context, 409,
            [FieldError("hundiNo", f"'{hundi_no}' is already in use")],
        )
        self.hundi_no = hundi_no


class ResourceNotFoundError(HundiError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            ErrorKind.NOT_FOUND, "RESOURCE_NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.ERROR, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidIdFormatError(HundiError):
    """Identifier is not a well-formed UUID."""
    def __init__(
        self, resource_type: str, raw_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Invalid {resource_type.lower()} ID format",
            ErrorKind.INVALID_ID_FORMAT, "INVALID_ID_FORMAT",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, context, 400,
        )
        self.resource_type = resource_type
        self.raw_id = raw_id


class InvalidTransitionError(HundiError):
    """Requested status change is not allowed by the donor state machine."""
    def __init__(
        self, from_status: str, to_status: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Invalid status transition from {from_status} to {to_status}",
            ErrorKind.INVALID_TRANSITION, "INVALID_STATUS_TRANSITION",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.ERROR, context, 400,
        )
        self.from_status = from_status
        self.to_status = to_status


class HasDependentRecordsError(HundiError):
    """Donor still has donations referencing it."""
    def __init__(
        self, donation_count: int | None = None, context: ErrorContext | None = None,
    ):
        super().__init__(
            "Cannot delete donor with existing donations. Please delete donations first.",
            ErrorKind.HAS_DEPENDENT_RECORDS, "DONOR_HAS_DONATIONS",
            ErrorCategory.CONFLICT, ErrorSeverity.ERROR, context, 409,
        )
        self.donation_count = donation_count


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DependencyInitFailedError(HundiError):
    """Default groups could not be bootstrapped."""
    def __init__(self, reason: str, context: ErrorContext | None = None):
        super().__init__(
            "Failed to initialize default groups. Please create a group first.",
            ErrorKind.DEPENDENCY_INIT_FAILED, "DEFAULT_GROUPS_INIT_FAILED",
            ErrorCategory.DATABASE, ErrorSeverity.CRITICAL, context, 500,
        )
        self.reason = reason


class MissingDefaultGroupError(HundiError):
    """No explicit group given and the default group does not exist."""
    def __init__(self, group_name: str, context: ErrorContext | None = None):
        super().__init__(
            "Default group not found. Please create a group first.",
            ErrorKind.MISSING_DEFAULT_GROUP, "DEFAULT_GROUP_MISSING",
            ErrorCategory.BUSINESS_RULE, ErrorSeverity.CRITICAL, context, 500,
        )
        self.group_name = group_name


class UnexpectedError(HundiError):
    """Any unhandled lower-layer failure, wrapped at the operation boundary."""
    def __init__(
        self, operation: str, detail: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            "An unexpected error occurred. Please try again.",
            ErrorKind.UNEXPECTED, "INTERNAL_ERROR",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.detail = detail

    def to_response(self, expose_detail: bool = False) -> dict:
        body = super().to_response(expose_detail)
        if expose_detail and self.detail:
            body["error"]["detail"] = self.detail
        return body
