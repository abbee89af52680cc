"""Domain error codes for the event manager."""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    INSUFFICIENT_AVAILABILITY = "INSUFFICIENT_AVAILABILITY"
    UNAUTHENTICATED = "UNAUTHENTICATED"
    UNKNOWN_ORGANISER = "UNKNOWN_ORGANISER"
    INCORRECT_PASSWORD = "INCORRECT_PASSWORD"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(DomainError):
    """Raised when required fields are missing or ticket totals are empty."""

    code = ErrorCode.INVALID_INPUT


class NotFoundError(DomainError):
    """Raised when an entity is missing or in the wrong state."""

    code = ErrorCode.NOT_FOUND


class InsufficientAvailabilityError(DomainError):
    """Raised when a booking asks for more tickets than remain."""

    code = ErrorCode.INSUFFICIENT_AVAILABILITY

    def __init__(
        self,
        message: str = "Not enough tickets available",
        full_available: int = 0,
        concession_available: int = 0,
    ) -> None:
        super().__init__(message)
        self.full_available = full_available
        self.concession_available = concession_available


class UnauthenticatedError(DomainError):
    """Raised when an organiser-only operation has no authenticated session."""

    code = ErrorCode.UNAUTHENTICATED

    def __init__(self, message: str = "Login required") -> None:
        super().__init__(message)


class AuthError(DomainError):
    """Base class for login failures."""


class UnknownOrganiserError(AuthError):
    code = ErrorCode.UNKNOWN_ORGANISER

    def __init__(self, message: str = "Invalid organiser selected.") -> None:
        super().__init__(message)


class IncorrectPasswordError(AuthError):
    code = ErrorCode.INCORRECT_PASSWORD

    def __init__(self, message: str = "Incorrect password. Please try again.") -> None:
        super().__init__(message)
