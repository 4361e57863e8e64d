"""Explicit state machine for one user's business day.

``derive_state`` reads the day's sessions into a :class:`SessionState`;
``transition`` is a pure lookup that either returns the next state or raises the
business error the event deserves from that state.
"""

from __future__ import annotations

from typing import Sequence, Type, Union

from ..core.enums import SessionEvent, SessionState
from ..core.exceptions import (
    AttendanceError,
    InvalidTransition,
    NoActiveSession,
    NoAttendanceToday,
    SessionConflict,
)
from .model import AttendanceSession
from .resolver import active_session

S = SessionState
E = SessionEvent

_Outcome = Union[SessionState, Type[AttendanceError]]

TRANSITIONS: dict[SessionEvent, dict[SessionState, _Outcome]] = {
    E.CLOCK_IN: {
        S.NO_SESSION: S.OPEN,
        S.OPEN: SessionConflict,
        S.ON_BREAK: SessionConflict,
        S.CLOSED: S.OPEN,
        S.PERMITTED: SessionConflict,
    },
    E.BREAK_START: {
        S.NO_SESSION: NoActiveSession,
        S.OPEN: S.ON_BREAK,
        S.ON_BREAK: InvalidTransition,
        S.CLOSED: NoActiveSession,
        S.PERMITTED: InvalidTransition,
    },
    E.BREAK_END: {
        S.NO_SESSION: NoActiveSession,
        S.OPEN: InvalidTransition,
        S.ON_BREAK: S.OPEN,
        S.CLOSED: NoActiveSession,
        S.PERMITTED: InvalidTransition,
    },
    E.CLOCK_OUT: {
        S.NO_SESSION: NoActiveSession,
        S.OPEN: S.CLOSED,
        S.ON_BREAK: S.CLOSED,
        S.CLOSED: NoActiveSession,
        S.PERMITTED: S.CLOSED,
    },
    E.PERMIT: {
        S.NO_SESSION: S.PERMITTED,
        S.OPEN: S.CLOSED,
        S.ON_BREAK: S.CLOSED,
        S.CLOSED: S.CLOSED,
        S.PERMITTED: S.PERMITTED,
    },
    E.RESUME: {
        S.NO_SESSION: NoAttendanceToday,
        S.OPEN: SessionConflict,
        S.ON_BREAK: SessionConflict,
        S.CLOSED: S.OPEN,
        S.PERMITTED: SessionConflict,
    },
}

MESSAGES: dict[Type[AttendanceError], str] = {
    SessionConflict: "Anda masih status MASUK. Harap absen PULANG terlebih dahulu.",
    NoActiveSession: "Tidak ada sesi aktif untuk hari ini",
    NoAttendanceToday: "Belum ada absensi untuk hari ini",
    InvalidTransition: "Aksi tidak diizinkan pada status saat ini",
}


def derive_state(sessions: Sequence[AttendanceSession]) -> SessionState:
    if not sessions:
        return S.NO_SESSION

    active = active_session(sessions)
    if active is None:
        return S.CLOSED
    if active.is_permit:
        return S.PERMITTED
    if active.is_on_break:
        return S.ON_BREAK
    return S.OPEN


def transition(state: SessionState, event: SessionEvent) -> SessionState:
    outcome = TRANSITIONS[event][state]
    if isinstance(outcome, SessionState):
        return outcome
    raise outcome(MESSAGES.get(outcome, "Aksi tidak diizinkan"))


def allowed_events(state: SessionState) -> list[SessionEvent]:
    """Events that would succeed from ``state`` (ignoring the daily session cap)."""
    return [e for e, table in TRANSITIONS.items() if isinstance(table[state], SessionState)]
