from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Session status as stored in the database."""

    PRESENT = "present"
    LATE = "late"
    SICK = "sick"
    PERMISSION = "permission"
    ABSENT = "absent"


class PermitType(str, Enum):
    SICK = "sick"
    PERMISSION = "permission"

    @property
    def status(self) -> AttendanceStatus:
        return AttendanceStatus(self.value)


PERMIT_STATUSES = frozenset({AttendanceStatus.SICK, AttendanceStatus.PERMISSION})
WORKING_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE})


class SessionState(str, Enum):
    """Where a user's business day currently stands."""

    NO_SESSION = "no_session"
    OPEN = "open"
    ON_BREAK = "on_break"
    CLOSED = "closed"
    PERMITTED = "permitted"


class SessionEvent(str, Enum):
    CLOCK_IN = "clock_in"
    BREAK_START = "break_start"
    BREAK_END = "break_end"
    CLOCK_OUT = "clock_out"
    PERMIT = "permit"
    RESUME = "resume"


class EvidenceAction(str, Enum):
    """Which event a photo/location pair was captured for."""

    CLOCK_IN = "clockIn"
    BREAK_START = "breakStart"
    BREAK_END = "breakEnd"
    CLOCK_OUT = "clockOut"


class ComplaintStatus(str, Enum):
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"
