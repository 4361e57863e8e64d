from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..common.datetime_utils import minutes_between
from .model import AttendanceSession


@dataclass(frozen=True)
class DailyTotals:
    total_work_mins: int = 0
    total_break_mins: int = 0
    net_work_mins: int = 0

    def to_dict(self) -> dict:
        return {
            "totalWorkMins": self.total_work_mins,
            "totalBreakMins": self.total_break_mins,
            "netWorkMins": self.net_work_mins,
        }


def session_work_minutes(session: AttendanceSession) -> int:
    """(check_out - check_in) minus the permit interval, not below 0."""
    minutes = minutes_between(session.check_in, session.check_out)
    if session.permit_exit_at and session.permit_resume_at:
        permit = minutes_between(session.permit_exit_at, session.permit_resume_at)
        minutes = max(0, minutes - permit)
    return minutes


def session_break_minutes(session: AttendanceSession) -> int:
    """Earlier break cycles plus the current one (0 while it is still running)."""
    return session.earlier_break_mins + minutes_between(session.break_start, session.break_end)


def aggregate(sessions: Iterable[AttendanceSession]) -> DailyTotals:
    work = 0
    brk = 0
    for s in sessions:
        work += session_work_minutes(s)
        brk += session_break_minutes(s)
    return DailyTotals(total_work_mins=work, total_break_mins=brk, net_work_mins=max(0, work - brk))


def format_duration(minutes: int) -> str:
    if minutes <= 0:
        return "-"
    return f"{minutes // 60}j {minutes % 60}m"
