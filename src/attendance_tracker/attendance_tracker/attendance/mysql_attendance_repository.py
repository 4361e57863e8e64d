from __future__ import annotations

from datetime import date
from typing import Any, Optional, Sequence

from ..common.datetime_utils import to_naive_utc
from ..core.enums import AttendanceStatus, WORKING_STATUSES
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, utc_or_none
from .model import AttendanceSession, Evidence, NewSession, SessionUpdate
from .repository import AttendanceRepository

_COLUMNS = """
    id, user_id, business_date, session_number, status, shift, notes,
    check_in, check_in_photo, check_in_location,
    break_start, break_start_photo, break_start_location,
    break_end, break_end_photo, break_end_location,
    check_out, check_out_photo, check_out_location,
    permit_exit_at, permit_resume_at, earlier_break_mins
"""


def _row_to_session(r: dict) -> AttendanceSession:
    return AttendanceSession(
        session_id=int(r["id"]),
        user_id=int(r["user_id"]),
        business_date=r["business_date"],
        session_number=int(r["session_number"] or 1),
        status=AttendanceStatus(r["status"]),
        shift=r.get("shift"),
        notes=r.get("notes"),
        check_in=utc_or_none(r.get("check_in")),
        check_out=utc_or_none(r.get("check_out")),
        break_start=utc_or_none(r.get("break_start")),
        break_end=utc_or_none(r.get("break_end")),
        permit_exit_at=utc_or_none(r.get("permit_exit_at")),
        permit_resume_at=utc_or_none(r.get("permit_resume_at")),
        earlier_break_mins=int(r.get("earlier_break_mins") or 0),
        check_in_evidence=Evidence(r.get("check_in_photo"), r.get("check_in_location")),
        break_start_evidence=Evidence(r.get("break_start_photo"), r.get("break_start_location")),
        break_end_evidence=Evidence(r.get("break_end_photo"), r.get("break_end_location")),
        check_out_evidence=Evidence(r.get("check_out_photo"), r.get("check_out_location")),
    )


def _update_assignments(changes: SessionUpdate) -> tuple[list[str], list[Any]]:
    sets: list[str] = []
    params: list[Any] = []

    def put(column: str, value: Any) -> None:
        sets.append(f"{column}=%s")
        params.append(value)

    if changes.status is not None:
        put("status", changes.status.value)
    if changes.notes is not None:
        put("notes", changes.notes)
    for column in ("check_out", "break_start", "break_end", "permit_exit_at", "permit_resume_at"):
        value = getattr(changes, column)
        if value is not None:
            put(column, to_naive_utc(value))
    if changes.earlier_break_mins is not None:
        put("earlier_break_mins", int(changes.earlier_break_mins))
    if changes.clear_break_end:
        put("break_end", None)
        put("break_end_photo", None)
        put("break_end_location", None)
    for prefix in ("check_in", "break_start", "break_end", "check_out"):
        ev: Optional[Evidence] = getattr(changes, f"{prefix}_evidence")
        if ev is not None:
            put(f"{prefix}_photo", ev.photo_ref)
            put(f"{prefix}_location", ev.location)

    return sets, params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user_and_date(self, user_id: int, business_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE user_id=%s AND business_date=%s
                ORDER BY session_number ASC
                """,
                (int(user_id), business_date),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(session_id),))
            r = fetchone(cur)
            return _row_to_session(r) if r else None

    def create_if_no_open(self, new: NewSession, *, max_sessions: int) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            # Row lock on the user serialises concurrent requests across processes.
            cur.execute("SELECT id FROM users WHERE id=%s FOR UPDATE", (int(new.user_id),))
            fetchall(cur)

            cur.execute(
                """
                INSERT INTO attendance(
                    user_id, business_date, session_number, status, shift, notes,
                    check_in, check_in_photo, check_in_location
                )
                SELECT %s, %s, COUNT(*) + 1, %s, %s, %s, %s, %s, %s
                FROM attendance
                WHERE user_id=%s AND business_date=%s
                HAVING COALESCE(SUM(check_out IS NULL), 0) = 0 AND COUNT(*) < %s
                """,
                (
                    int(new.user_id),
                    new.business_date,
                    new.status.value,
                    new.shift,
                    new.notes,
                    to_naive_utc(new.check_in),
                    new.check_in_evidence.photo_ref,
                    new.check_in_evidence.location,
                    int(new.user_id),
                    new.business_date,
                    int(max_sessions),
                ),
            )
            if cur.rowcount < 1:
                return None

            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (new_id,))
            return _row_to_session(fetchone(cur))

    def update_session(self, session_id: int, changes: SessionUpdate) -> AttendanceSession:
        sets, params = _update_assignments(changes)
        with db_cursor(self._conn_factory) as (_, cur):
            if sets:
                cur.execute(
                    f"UPDATE attendance SET {', '.join(sets)} WHERE id=%s",
                    (*params, int(session_id)),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (int(session_id),))
            r = fetchone(cur)
            if not r:
                raise NotFoundError(f"Sesi absensi {session_id} tidak ditemukan")
            return _row_to_session(r)

    def list_history(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceSession]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if start_date is not None:
            clauses.append("business_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("business_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance
                WHERE {where}
                ORDER BY business_date DESC, session_number DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def count_users_working_on(self, business_date: date) -> int:
        statuses = sorted(s.value for s in WORKING_STATUSES)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT user_id) AS n
                FROM attendance
                WHERE business_date=%s AND status IN (%s, %s)
                """,
                (business_date, *statuses),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
