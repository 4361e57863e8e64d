from datetime import date, datetime, timezone

import pytest

from src.attendance_tracker.attendance_tracker.attendance.model import AttendanceSession
from src.attendance_tracker.attendance_tracker.attendance.state import allowed_events, derive_state, transition
from src.attendance_tracker.attendance_tracker.core.enums import AttendanceStatus, SessionEvent, SessionState
from src.attendance_tracker.attendance_tracker.core.exceptions import (
    InvalidTransition,
    NoActiveSession,
    NoAttendanceToday,
    SessionConflict,
)

T0 = datetime(2025, 3, 10, 1, 0, tzinfo=timezone.utc)
T1 = datetime(2025, 3, 10, 5, 0, tzinfo=timezone.utc)


def _session(number=1, *, status=AttendanceStatus.PRESENT, check_out=None, break_start=None, break_end=None):
    return AttendanceSession(
        session_id=number,
        user_id=2,
        business_date=date(2025, 3, 10),
        session_number=number,
        status=status,
        check_in=T0,
        check_out=check_out,
        break_start=break_start,
        break_end=break_end,
    )


def test_derive_state():
    assert derive_state([]) == SessionState.NO_SESSION
    assert derive_state([_session()]) == SessionState.OPEN
    assert derive_state([_session(break_start=T0)]) == SessionState.ON_BREAK
    assert derive_state([_session(break_start=T0, break_end=T1)]) == SessionState.OPEN
    assert derive_state([_session(check_out=T1)]) == SessionState.CLOSED
    assert derive_state([_session(status=AttendanceStatus.SICK)]) == SessionState.PERMITTED


def test_closed_day_with_reopened_session_is_open():
    sessions = [_session(1, check_out=T1), _session(2)]
    assert derive_state(sessions) == SessionState.OPEN


@pytest.mark.parametrize(
    "state,event,expected",
    [
        (SessionState.NO_SESSION, SessionEvent.CLOCK_IN, SessionState.OPEN),
        (SessionState.CLOSED, SessionEvent.CLOCK_IN, SessionState.OPEN),
        (SessionState.OPEN, SessionEvent.BREAK_START, SessionState.ON_BREAK),
        (SessionState.ON_BREAK, SessionEvent.BREAK_END, SessionState.OPEN),
        (SessionState.ON_BREAK, SessionEvent.CLOCK_OUT, SessionState.CLOSED),
        (SessionState.PERMITTED, SessionEvent.CLOCK_OUT, SessionState.CLOSED),
        (SessionState.NO_SESSION, SessionEvent.PERMIT, SessionState.PERMITTED),
        (SessionState.OPEN, SessionEvent.PERMIT, SessionState.CLOSED),
        (SessionState.CLOSED, SessionEvent.RESUME, SessionState.OPEN),
    ],
)
def test_allowed_transitions(state, event, expected):
    assert transition(state, event) == expected


@pytest.mark.parametrize(
    "state,event,error",
    [
        (SessionState.OPEN, SessionEvent.CLOCK_IN, SessionConflict),
        (SessionState.PERMITTED, SessionEvent.CLOCK_IN, SessionConflict),
        (SessionState.ON_BREAK, SessionEvent.RESUME, SessionConflict),
        (SessionState.NO_SESSION, SessionEvent.CLOCK_OUT, NoActiveSession),
        (SessionState.CLOSED, SessionEvent.BREAK_START, NoActiveSession),
        (SessionState.OPEN, SessionEvent.BREAK_END, InvalidTransition),
        (SessionState.ON_BREAK, SessionEvent.BREAK_START, InvalidTransition),
        (SessionState.NO_SESSION, SessionEvent.RESUME, NoAttendanceToday),
    ],
)
def test_rejected_transitions(state, event, error):
    with pytest.raises(error):
        transition(state, event)


def test_allowed_events():
    assert allowed_events(SessionState.NO_SESSION) == [SessionEvent.CLOCK_IN, SessionEvent.PERMIT]
    assert allowed_events(SessionState.CLOSED) == [SessionEvent.CLOCK_IN, SessionEvent.PERMIT, SessionEvent.RESUME]
    assert allowed_events(SessionState.PERMITTED) == [SessionEvent.CLOCK_OUT, SessionEvent.PERMIT]
