"""Error Hierarchy — typed, categorized exceptions for all DevConnect failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are client-correctable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by the global handlers
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with DevConnectError base: FastAPI global handler catches all (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    actor_email: str | None = None
    resource_type: str | None = None
    resource_id: str | None = None
    debug_info: dict[str, Any] | None = None


class DevConnectError(Exception):
    """Base exception for all DevConnect errors."""

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

    @property
    def is_client_error(self) -> bool:
        return self.http_status < 500

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "success": False,
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "resource_type": self.context.resource_type,
                    "resource_id": self.context.resource_id,
                },
            },
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class UnauthorizedError(DevConnectError):
    """No verified identity, or the bearer credential failed verification."""
    def __init__(
        self, message: str = "Authentication required", context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHORIZED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(DevConnectError):
    """Authorization policy denied the action."""
    def __init__(self, reason: str, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, reason, ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.reason = reason


class RedundantUpdateError(DevConnectError):
    """Requested update would leave the resource unchanged."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "REDUNDANT_UPDATE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class PostLimitReachedError(DevConnectError):
    """Unpaid member already published the maximum number of posts."""
    def __init__(self, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Free members can publish at most {limit} posts. Upgrade to post more.",
            "POST_LIMIT_REACHED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 403,
        )
        self.limit = limit


class ResourceNotFoundError(DevConnectError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_type = resource_type
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class PaymentNotCompletedError(DevConnectError):
    """Payment intent exists but has not succeeded for this member."""
    def __init__(self, intent_id: str, context: ErrorContext | None = None):
        super().__init__(
            f"Payment '{intent_id}' has not been completed",
            "PAYMENT_NOT_COMPLETED", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, context, 400,
        )


class DuplicateResourceError(DevConnectError):
    """Unique key already taken."""
    def __init__(self, resource_type: str, key: str, context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} '{key}' already exists",
            "DUPLICATE_RESOURCE", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


class ConcurrencyError(DevConnectError):
    """Concurrent modification detected."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONCURRENCY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(DevConnectError):
    """Database unreachable or a write failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation


class PaymentProviderError(DevConnectError):
    """Payment provider call failed or returned an unusable response."""
    def __init__(
        self, message: str, provider_error_type: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Payment provider error ({provider_error_type}): {message}",
            "PAYMENT_PROVIDER_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.provider_error_type = provider_error_type
