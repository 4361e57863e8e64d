from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from itertools import groupby
from typing import Optional

from ..attendance.duration import aggregate, format_duration
from ..attendance.model import AttendanceSession
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import DEFAULT_CLOCK, BusinessClock, now_utc, parse_month
from ..core.enums import Role
from ..users.repository import UserRepository

CSV_FIELDS = [
    "date",
    "sessions",
    "first_check_in",
    "last_check_out",
    "statuses",
    "work",
    "break",
    "net_work",
    "net_work_mins",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


class ReportService:
    """Per-day attendance rollups built on the duration aggregator."""

    def __init__(self, attendance: AttendanceRepository, users: UserRepository, *, clock: BusinessClock = DEFAULT_CLOCK):
        self._attendance = attendance
        self._users = users
        self._clock = clock

    def _hhmm(self, value: Optional[datetime]) -> str:
        return self._clock.to_local(value).strftime("%H:%M") if value else "-"

    def _day_row(self, day: date, sessions: list[AttendanceSession]) -> dict:
        sessions = sorted(sessions, key=lambda s: s.session_number)
        totals = aggregate(sessions)
        check_ins = [s.check_in for s in sessions if s.check_in]
        check_outs = [s.check_out for s in sessions if s.check_out]

        return {
            "date": day.isoformat(),
            "sessions": len(sessions),
            "first_check_in": self._hhmm(min(check_ins) if check_ins else None),
            "last_check_out": self._hhmm(max(check_outs) if check_outs else None),
            "statuses": ",".join(dict.fromkeys(s.status.value for s in sessions)),
            "work": format_duration(totals.total_work_mins),
            "break": format_duration(totals.total_break_mins),
            "net_work": format_duration(totals.net_work_mins),
            "net_work_mins": totals.net_work_mins,
        }

    def monthly_report(self, *, user_id: int, month: str) -> ReportData:
        start, end = parse_month(month)
        sessions = self._attendance.list_history(user_id=user_id, start_date=start, end_date=end, limit=10_000)

        ordered = sorted(sessions, key=lambda s: (s.business_date, s.session_number))
        rows = [self._day_row(day, list(group)) for day, group in groupby(ordered, key=lambda s: s.business_date)]

        total_net = sum(int(r["net_work_mins"]) for r in rows)
        summary = {
            "month": month,
            "days": len(rows),
            "total_net_work_mins": total_net,
            "total_net_work": format_duration(total_net),
        }
        return ReportData(rows=rows, summary=summary)

    @staticmethod
    def to_csv(data: ReportData) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)
        return out.getvalue().encode("utf-8-sig")

    def dashboard_stats(self, *, now: datetime | None = None) -> dict:
        today = self._clock.business_date(now or now_utc())
        users = self._users.list_all()
        return {
            "totalEmployees": sum(1 for u in users if u.role == Role.EMPLOYEE),
            "presentToday": self._attendance.count_users_working_on(today),
        }
