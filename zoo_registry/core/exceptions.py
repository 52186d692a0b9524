"""
Custom exceptions and operation results for the registration system.

Business rule violations are raised as RegistrationError subclasses inside
the service and converted into an OperationResult at the service boundary,
so callers can tell the causes apart without parsing messages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    ALREADY_ENROLLED = "already_enrolled"
    NOT_ENROLLED = "not_enrolled"
    UNAUTHORIZED = "unauthorized"
    INVALID_INPUT = "invalid_input"
    NO_MATCHING_DATA = "no_matching_data"


class RegistrationError(Exception):
    """Base class for recoverable business rule violations."""

    kind: ErrorKind

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or [message]


class NotFoundError(RegistrationError):
    """An id does not resolve to a stored entity."""

    kind = ErrorKind.NOT_FOUND


class DuplicateError(RegistrationError):
    """An entity with the same id is already stored."""

    kind = ErrorKind.DUPLICATE


class CapacityExceededError(RegistrationError):
    """Sign-up against an attraction with no free places."""

    kind = ErrorKind.CAPACITY_EXCEEDED


class AlreadyEnrolledError(RegistrationError):
    kind = ErrorKind.ALREADY_ENROLLED


class NotEnrolledError(RegistrationError):
    kind = ErrorKind.NOT_ENROLLED


class UnauthorizedError(RegistrationError):
    """Requesting instructor does not hold the attraction, or wrong password."""

    kind = ErrorKind.UNAUTHORIZED


class InvalidInputError(RegistrationError):
    """Malformed name, username, password, weekday, price or capacity."""

    kind = ErrorKind.INVALID_INPUT


@dataclass
class OperationResult:
    """Outcome of a service command.

    Truthiness follows ``success`` so boolean call sites keep working.
    """

    success: bool
    value: Any = None
    error: Optional[ErrorKind] = None
    message: str = ""
    errors: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, value: Any = None, message: str = "") -> "OperationResult":
        return cls(success=True, value=value, message=message)

    @classmethod
    def failure(cls, exc: RegistrationError) -> "OperationResult":
        return cls(
            success=False,
            error=exc.kind,
            message=exc.message,
            errors=list(exc.errors),
        )
