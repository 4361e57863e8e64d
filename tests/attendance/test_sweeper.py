from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceSession
from src.attendance_tracker.attendance_tracker.attendance.sweeper import AutoCloseSweeper, auto_close_note
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, SessionState

JKT = ZoneInfo("Asia/Jakarta")
EMP = 2


def _jkt(*args) -> datetime:
    return datetime(*args, tzinfo=JKT).astimezone(timezone.utc)


def test_auto_close_note():
    assert auto_close_note(None) == "Auto-closed at 04:00"
    assert auto_close_note("") == "Auto-closed at 04:00"
    assert auto_close_note("Lembur") == "Lembur (Auto-closed at 04:00)"


def test_today_closes_yesterdays_forgotten_session(attendance_service, attendance_repo):
    opened = attendance_service.clock_in(EMP, shift="Shift 2", now=_jkt(2025, 3, 10, 20, 0))

    sessions = attendance_service.today(EMP, now=_jkt(2025, 3, 11, 5, 0))

    assert sessions == []
    closed = attendance_repo.get_by_id(opened.session_id)
    assert closed.check_out == _jkt(2025, 3, 11, 4, 0)
    assert closed.notes == "Auto-closed at 04:00"


def test_sweep_runs_once(attendance_service, attendance_repo):
    opened = attendance_service.clock_in(EMP, now=_jkt(2025, 3, 10, 20, 0))
    attendance_service.today(EMP, now=_jkt(2025, 3, 11, 5, 0))
    first = attendance_repo.get_by_id(opened.session_id)

    attendance_service.today(EMP, now=_jkt(2025, 3, 11, 6, 0))

    assert attendance_repo.get_by_id(opened.session_id) == first


def test_existing_notes_are_kept(attendance_repo, clock):
    attendance_repo.add(
        AttendanceSession(
            session_id=7,
            user_id=EMP,
            business_date=date(2025, 3, 10),
            session_number=1,
            status=AttendanceStatus.PRESENT,
            check_in=_jkt(2025, 3, 10, 21, 0),
            notes="Lembur",
        )
    )

    closed = AutoCloseSweeper(attendance_repo, clock=clock).sweep(EMP, now=_jkt(2025, 3, 11, 9, 0))

    assert closed.notes == "Lembur (Auto-closed at 04:00)"
    assert closed.check_out == _jkt(2025, 3, 11, 4, 0)


def test_nothing_to_close(attendance_repo, clock):
    assert AutoCloseSweeper(attendance_repo, clock=clock).sweep(EMP, now=_jkt(2025, 3, 11, 9, 0)) is None


def test_before_cutover_session_is_still_today(attendance_service, attendance_repo):
    opened = attendance_service.clock_in(EMP, now=_jkt(2025, 3, 10, 20, 0))

    sessions = attendance_service.today(EMP, now=_jkt(2025, 3, 11, 3, 30))

    assert [s.session_id for s in sessions] == [opened.session_id]
    assert attendance_repo.get_by_id(opened.session_id).is_open


def test_new_day_starts_clean_after_sweep(attendance_service):
    attendance_service.clock_in(EMP, now=_jkt(2025, 3, 10, 20, 0))
    attendance_service.today(EMP, now=_jkt(2025, 3, 11, 5, 0))

    s = attendance_service.clock_in(EMP, now=_jkt(2025, 3, 11, 6, 0))
    summary = attendance_service.day_summary(EMP, now=_jkt(2025, 3, 11, 6, 30))

    assert s.session_number == 1
    assert summary.state == SessionState.OPEN
