"""Error Hierarchy — typed, categorized exceptions for all TaskGraph failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the single REST envelope used by every handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with TaskGraphError base: FastAPI global handler catches all (uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - Pure enforce_* modules return error dicts; InvalidMutationError.from_rejection
      lifts them into exceptions at the shell boundary
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
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    project_id: str | None = None
    node_id: str | None = None
    edge_id: str | None = None
    request_id: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class TaskGraphError(Exception):
    """Base exception for all TaskGraph errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.context.user_message or self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
            "context": {
                "project_id": self.context.project_id,
                "node_id": self.context.node_id,
                "edge_id": self.context.edge_id,
                "request_id": self.context.request_id,
            },
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class InvalidMutationError(TaskGraphError):
    """A graph or request mutation violates an invariant. Nothing was written."""
    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400, details,
        )

    @classmethod
    def from_rejection(
        cls, rejection: dict, context: ErrorContext | None = None,
    ) -> "InvalidMutationError":
        """Lift an enforce_* error dict into an exception."""
        message = rejection["message"].removeprefix("ERROR: ")
        return cls(message, rejection["error_code"], rejection.get("details"), context)


class ResourceNotFoundError(TaskGraphError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(TaskGraphError):
    """Concurrent or competing modification (e.g. a request claimed twice)."""
    def __init__(
        self, message: str, code: str = "CONFLICT", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TaskGraphError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
