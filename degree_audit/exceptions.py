"""
Custom exceptions for the degree audit package.
Provides specific exception types for better error handling.
"""


class AuditError(Exception):
    """Base exception for all degree-audit errors."""
    pass


class InvalidCourseError(AuditError, ValueError):
    """Raised when a course record cannot be constructed."""
    pass


class InvalidCourseCodeError(InvalidCourseError):
    """Raised when a course code does not look like PREFIX digits SUFFIX."""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Invalid course code: {code!r}")


class BasketConstructionError(AuditError, ValueError):
    """Raised when a requirement basket is built with unusable parameters."""
    pass


class RequirementConfigError(AuditError):
    """Raised when a requirement document is malformed or cannot be read."""

    def __init__(self, message: str, path: str = "$"):
        self.path = path
        super().__init__(f"{message} (at {path})")


class PlanFormatError(AuditError):
    """Raised when a student plan document is malformed or cannot be read."""
    pass
