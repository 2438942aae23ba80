# core/exceptions.py
from core.results import ErrorKind


class AcademiaException(Exception):
    """Base exception for all academic records errors."""

    error_kind = None

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


class NotFoundError(AcademiaException):
    """Referenced application or student does not exist."""
    error_kind = ErrorKind.NOT_FOUND

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Record not found", user_friendly, details, "NOT_FOUND")


class InvalidStateError(AcademiaException):
    """Operation attempted from a status that does not permit it."""
    error_kind = ErrorKind.INVALID_STATE

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Operation not allowed in the current state", user_friendly, details, "INVALID_STATE")


class BusinessRuleViolation(AcademiaException):
    """A business rule forbids the operation (duplicate application, missing admission...)."""
    error_kind = ErrorKind.BUSINESS_RULE_VIOLATION

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Business rule violated", user_friendly, details, "BUSINESS_RULE_VIOLATION")


class ValidationError(AcademiaException):
    """Data validation errors."""
    error_kind = ErrorKind.VALIDATION

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Validation failed", user_friendly, details, "VALIDATION_ERROR")


class RolePermissionError(AcademiaException):
    """Authorization and permission-related errors."""

    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Insufficient permissions", user_friendly, details, "PERMISSION_ERROR")


EXCEPTION_BY_KIND = {
    ErrorKind.NOT_FOUND: NotFoundError,
    ErrorKind.INVALID_STATE: InvalidStateError,
    ErrorKind.BUSINESS_RULE_VIOLATION: BusinessRuleViolation,
    ErrorKind.VALIDATION: ValidationError,
}
