"""Error Hierarchy — typed, categorized exceptions for all storefront failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are caller-visible and not retriable without new input
    - StorageFailure (503) is the only retryable error and never carries driver detail
    - to_response() produces the REST envelope used by the global handlers

Design Decisions:
    - Single hierarchy with StorefrontError base: FastAPI global handler catches all
    - ErrorContext as dataclass: rich observability without coupling to logging
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
    AUTHORIZATION = "authorization"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: int | None = None
    product_id: int | None = None
    user_id: int | None = None
    debug_info: dict[str, Any] | None = None


class StorefrontError(Exception):
    """Base exception for all storefront errors."""

    retryable: bool = False

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
                "retryable": self.retryable,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "order_id": self.context.order_id,
                    "product_id": self.context.product_id,
                },
            }
        }


# ─── Domain Errors (400-level) ──────────────────────────────────

class ValidationError(StorefrontError):
    """Malformed input, rejected before any storage access."""
    def __init__(
        self, message: str, field: str, code: str = "VALIDATION_ERROR",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class EmptyItemListError(ValidationError):
    """Placement requested with no items."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Order must contain at least one item.", "items",
            "EMPTY_ITEM_LIST", context,
        )


class ProductNotFoundError(StorefrontError):
    """Referenced product does not exist."""
    def __init__(self, product_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.product_id = product_id
        super().__init__(
            f"Product '{product_id}' not found",
            "PRODUCT_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.product_id = product_id


class InsufficientStockError(StorefrontError):
    """Requested quantity exceeds the product's remaining stock."""
    def __init__(
        self, product_id: int, requested: int, available: int | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.product_id = product_id
        super().__init__(
            f"Insufficient stock for product '{product_id}' "
            f"(requested {requested})",
            "INSUFFICIENT_STOCK", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidTransitionError(StorefrontError):
    """Order status change not permitted from its current status."""
    def __init__(
        self, order_id: int, current: str, target: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.order_id = order_id
        super().__init__(
            f"Order '{order_id}' cannot move from '{current}' to '{target}'",
            "INVALID_TRANSITION", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.WARNING, ctx, 409,
        )
        self.current = current
        self.target = target


class ForbiddenError(StorefrontError):
    """Caller lacks the rights for this operation."""
    def __init__(self, action: str, context: ErrorContext | None = None):
        super().__init__(
            f"You are not authorized to {action}",
            "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )
        self.action = action


class AuthenticationRequiredError(StorefrontError):
    """No caller identity was supplied by the auth gateway."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Authentication required",
            "AUTHENTICATION_REQUIRED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 401,
        )


class OrderNotFoundError(StorefrontError):
    """Order does not exist or has been soft-deleted."""
    def __init__(self, order_id: int, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.order_id = order_id
        super().__init__(
            f"Order '{order_id}' not found",
            "ORDER_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )


class DuplicateProductError(StorefrontError):
    """Another product already uses this name."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Product with name '{name}' already exists",
            "DUPLICATE_PRODUCT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFailure(StorefrontError):
    """Storage operation failed; nothing was committed."""

    retryable = True

    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_FAILURE", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
