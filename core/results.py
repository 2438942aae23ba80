# core/results.py
"""
Structured outcome of a workflow operation.

Workflow services return a ServiceResult instead of raising for expected
failures, so callers branch on ``error_kind`` rather than on message text.
"""
import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


class ErrorKind(str, enum.Enum):
    NOT_FOUND = 'not_found'
    INVALID_STATE = 'invalid_state'
    BUSINESS_RULE_VIOLATION = 'business_rule_violation'
    VALIDATION = 'validation'


@dataclass(frozen=True)
class ServiceResult:
    ok: bool
    value: Any = None
    error_kind: Optional[ErrorKind] = None
    message: str = ''
    details: Dict[str, Any] = field(default_factory=dict)

    def __bool__(self):
        return self.ok

    @classmethod
    def success(cls, value=None, message=''):
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error_kind, message, details=None):
        return cls(ok=False, error_kind=ErrorKind(error_kind), message=message, details=details or {})

    @classmethod
    def from_exception(cls, exc):
        """Build a failed result from an AcademiaException carrying an error kind."""
        return cls.failure(exc.error_kind, exc.message, exc.details)

    def unwrap(self):
        """Return the value, or raise the exception matching ``error_kind``."""
        if self.ok:
            return self.value
        from core.exceptions import EXCEPTION_BY_KIND
        raise EXCEPTION_BY_KIND[self.error_kind](self.message, details=self.details)
