class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AttendanceError(DomainError):
    """Base class for attendance session rule violations."""


class SessionConflict(AttendanceError):
    """An operation that needs no open session found one."""


class SessionLimitExceeded(AttendanceError):
    """The daily session cap has been reached."""


class NoActiveSession(AttendanceError):
    """Break or clock-out attempted with nothing open."""


class NoAttendanceToday(AttendanceError):
    """Resume attempted before any session was recorded today."""


class InvalidTransition(AttendanceError):
    """The event is not allowed from the current session state."""
