from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import PERMIT_STATUSES, AttendanceStatus


@dataclass(frozen=True)
class Evidence:
    """Photo reference plus location captured at a state transition."""

    photo_ref: Optional[str] = None
    location: Optional[str] = None


NO_EVIDENCE = Evidence()


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one clock-in to clock-out unit of work within a business date."""

    session_id: int
    user_id: int
    business_date: date
    session_number: int
    status: AttendanceStatus
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    shift: Optional[str] = None
    notes: Optional[str] = None
    permit_exit_at: Optional[datetime] = None
    permit_resume_at: Optional[datetime] = None
    # Minutes of the break cycles that ended before the current break_start.
    earlier_break_mins: int = 0
    check_in_evidence: Evidence = field(default=NO_EVIDENCE)
    break_start_evidence: Evidence = field(default=NO_EVIDENCE)
    break_end_evidence: Evidence = field(default=NO_EVIDENCE)
    check_out_evidence: Evidence = field(default=NO_EVIDENCE)

    @property
    def is_open(self) -> bool:
        return self.check_out is None

    @property
    def is_on_break(self) -> bool:
        return self.break_start is not None and self.break_end is None

    @property
    def is_permit(self) -> bool:
        return self.status in PERMIT_STATUSES

    def to_dict(self) -> dict:
        def _ts(v: Optional[datetime]) -> Optional[str]:
            return v.isoformat() if v else None

        return {
            "id": self.session_id,
            "userId": self.user_id,
            "date": self.business_date.isoformat(),
            "sessionNumber": self.session_number,
            "status": self.status.value,
            "shift": self.shift,
            "notes": self.notes,
            "checkIn": _ts(self.check_in),
            "checkInPhoto": self.check_in_evidence.photo_ref,
            "checkInLocation": self.check_in_evidence.location,
            "breakStart": _ts(self.break_start),
            "breakStartPhoto": self.break_start_evidence.photo_ref,
            "breakStartLocation": self.break_start_evidence.location,
            "breakEnd": _ts(self.break_end),
            "breakEndPhoto": self.break_end_evidence.photo_ref,
            "breakEndLocation": self.break_end_evidence.location,
            "checkOut": _ts(self.check_out),
            "checkOutPhoto": self.check_out_evidence.photo_ref,
            "checkOutLocation": self.check_out_evidence.location,
            "permitExitAt": _ts(self.permit_exit_at),
            "permitResumeAt": _ts(self.permit_resume_at),
            "earlierBreakMins": self.earlier_break_mins,
        }


@dataclass(frozen=True)
class NewSession:
    """Values for a session about to be inserted (session number is assigned on insert)."""

    user_id: int
    business_date: date
    status: AttendanceStatus
    check_in: datetime
    shift: Optional[str] = None
    notes: Optional[str] = None
    check_in_evidence: Evidence = field(default=NO_EVIDENCE)


@dataclass(frozen=True)
class SessionUpdate:
    """Partial update of a session. Only fields that are not None are written.

    ``clear_break_end`` empties the break-end slot (timestamp and evidence) so a new
    break cycle can start.
    """

    status: Optional[AttendanceStatus] = None
    notes: Optional[str] = None
    check_out: Optional[datetime] = None
    break_start: Optional[datetime] = None
    break_end: Optional[datetime] = None
    permit_exit_at: Optional[datetime] = None
    permit_resume_at: Optional[datetime] = None
    earlier_break_mins: Optional[int] = None
    clear_break_end: bool = False
    check_in_evidence: Optional[Evidence] = None
    break_start_evidence: Optional[Evidence] = None
    break_end_evidence: Optional[Evidence] = None
    check_out_evidence: Optional[Evidence] = None
