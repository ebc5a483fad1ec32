"""Error Hierarchy — typed, categorized exceptions for every mapper failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
      and the HTTP status the dispatcher answers with
    - Domain errors (400/404) are recoverable; DatabaseError (500) is critical
    - to_envelope() produces the {status, msg} response envelope; data is never attached

Design Decisions:
    - Single hierarchy with MapperError base: dispatcher and FastAPI handlers catch one type
    - DatabaseError carries the driver's condition name as its message, unredacted
"""

from enum import Enum


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


class MapperError(Exception):
    """Base exception for all mapper errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.http_status = http_status

    def to_envelope(self) -> dict:
        """Convert to the uniform response envelope."""
        return {"status": self.http_status, "msg": self.message}


# ─── Domain Errors (400/404) ────────────────────────────────────

class NotFoundError(MapperError):
    """No behavior matched the path, or a delete affected zero rows."""
    def __init__(self, message: str = "not found"):
        super().__init__(
            message, "NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, 404,
        )


class DuplicateKeyError(MapperError):
    """A uniqueness constraint was violated on create/update."""
    def __init__(self):
        super().__init__(
            "item identifier not unique", "DUPLICATE_KEY",
            ErrorCategory.CONFLICT, ErrorSeverity.WARNING, 400,
        )


class IdentifierUpdateError(MapperError):
    """An update submitted the identifier column's name as a field value."""
    def __init__(self):
        super().__init__(
            "item identifier can not be updated", "IDENTIFIER_UPDATE",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, 400,
        )


class ValidationError(MapperError):
    """Request is structurally incomplete (e.g. missing identifier segment)."""
    def __init__(self, message: str = "missing item identifier", code: str = "VALIDATION_ERROR"):
        super().__init__(
            message, code, ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, 400,
        )


class InvalidValueError(ValidationError):
    """A submitted value cannot be cast to its column's declared type."""
    def __init__(self, parameter: str, column_type: str):
        super().__init__(
            f"invalid value for {parameter}: expected {column_type}",
            "INVALID_VALUE",
        )
        self.parameter = parameter
        self.column_type = column_type


# ─── Infrastructure Errors (500) ────────────────────────────────

class DatabaseError(MapperError):
    """Any driver/query failure not classified above."""
    def __init__(self, condition: str):
        super().__init__(
            condition, "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, 500,
        )
        self.condition = condition
