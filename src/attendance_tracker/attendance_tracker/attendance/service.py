from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import (
    DEFAULT_CLOCK,
    BusinessClock,
    minutes_between,
    now_utc,
    parse_iso_date,
    parse_month,
)
from ..common.locks import KeyedLocks
from ..common.validators import blank_to_none
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_SHIFT, MAX_SESSIONS_PER_DAY
from ..core.enums import EvidenceAction, PermitType, SessionEvent, SessionState
from ..core.exceptions import (
    NotFoundError,
    SessionConflict,
    SessionLimitExceeded,
    ValidationError,
)
from ..evidence.photo import PhotoUpload
from ..evidence.store import EvidenceStore, capture
from ..users.repository import UserRepository
from .duration import DailyTotals, aggregate
from .factory import LatenessStrategyFactory
from .model import AttendanceSession, Evidence, NewSession, SessionUpdate
from .repository import AttendanceRepository
from .resolver import SessionResolver, active_session
from .state import allowed_events, derive_state, transition
from .sweeper import AutoCloseSweeper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySummary:
    business_date: date
    state: SessionState
    sessions: list[AttendanceSession]
    totals: DailyTotals
    allowed: list[SessionEvent]

    def to_dict(self) -> dict:
        return {
            "date": self.business_date.isoformat(),
            "state": self.state.value,
            "sessions": [s.to_dict() for s in self.sessions],
            "totals": self.totals.to_dict(),
            "allowedActions": [e.value for e in self.allowed],
        }


class AttendanceService:
    """Use cases: clock-in/out, breaks, permits and resume for one employee's business day.

    Every operation resolves the business date, reads the day's sessions, runs the
    state machine and only then stores evidence and writes a single record.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        evidence: EvidenceStore,
        *,
        clock: BusinessClock = DEFAULT_CLOCK,
        strategy_factory: LatenessStrategyFactory | None = None,
        sweeper: AutoCloseSweeper | None = None,
        max_sessions: int = MAX_SESSIONS_PER_DAY,
        locks: KeyedLocks | None = None,
    ):
        self._attendance = attendance
        self._users = users
        self._evidence = evidence
        self._clock = clock
        self._resolver = SessionResolver(attendance)
        self._factory = strategy_factory or LatenessStrategyFactory()
        self._sweeper = sweeper or AutoCloseSweeper(attendance, clock=clock)
        self._max_sessions = int(max_sessions)
        self._locks = locks or KeyedLocks()

    # ----- helpers -----

    def _employee_name(self, user_id: int) -> str:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Karyawan tidak ditemukan")
        return user.full_name

    def _check(self, sessions: Sequence[AttendanceSession], event: SessionEvent) -> SessionState:
        state = derive_state(sessions)
        try:
            return transition(state, event)
        except SessionConflict:
            active = active_session(sessions)
            number = active.session_number if active else "?"
            raise SessionConflict(
                f"Anda masih status MASUK (Sesi {number}). Harap absen PULANG terlebih dahulu."
            ) from None

    def _check_limit(self, sessions: Sequence[AttendanceSession]) -> None:
        if len(sessions) >= self._max_sessions:
            raise SessionLimitExceeded(f"Batas harian {self._max_sessions} sesi tercapai.")

    def _capture(
        self,
        user_id: int,
        photo: Optional[PhotoUpload],
        location: Optional[str],
        action: EvidenceAction,
        *,
        employee_name: Optional[str] = None,
    ) -> Evidence:
        return capture(
            self._evidence,
            photo,
            location,
            action=action,
            employee_name=employee_name or self._employee_name(user_id),
        )

    def _create(self, new: NewSession, *, max_sessions: int) -> AttendanceSession:
        created = self._attendance.create_if_no_open(new, max_sessions=max_sessions)
        if created is not None:
            return created

        # Lost a race with another writer: report what is there now.
        sessions = self._resolver.sessions_for_day(new.user_id, new.business_date)
        if active_session(sessions) is not None:
            self._check(sessions, SessionEvent.CLOCK_IN)
        raise SessionLimitExceeded(f"Batas harian {max_sessions} sesi tercapai.")

    def _open_session(
        self,
        new: NewSession,
        *,
        employee_name: str,
        photo: Optional[PhotoUpload],
        max_sessions: int,
    ) -> AttendanceSession:
        """Insert the session, then store the check-in photo and attach it.

        A refused insert raises before anything is written to the evidence store.
        """
        created = self._create(new, max_sessions=max_sessions)
        evidence = self._capture(
            new.user_id,
            photo,
            new.check_in_evidence.location,
            EvidenceAction.CLOCK_IN,
            employee_name=employee_name,
        )
        if evidence.photo_ref is None:
            return created
        return self._attendance.update_session(created.session_id, SessionUpdate(check_in_evidence=evidence))

    # ----- operations -----

    def clock_in(
        self,
        user_id: int,
        *,
        shift: Optional[str] = None,
        photo: Optional[PhotoUpload] = None,
        location: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceSession:
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            logger.info("user %s clock-in on %s (%d existing sessions)", user_id, today, len(sessions))

            self._check(sessions, SessionEvent.CLOCK_IN)
            self._check_limit(sessions)
            name = self._employee_name(user_id)

            shift = blank_to_none(shift) or DEFAULT_SHIFT
            strategy = self._factory.for_clock_in(shift=shift)
            decision = strategy.decide(minutes_of_day=self._clock.minutes_of_day(now))

            created = self._open_session(
                NewSession(
                    user_id=user_id,
                    business_date=today,
                    status=decision.status,
                    check_in=now,
                    shift=shift,
                    notes=decision.note,
                    check_in_evidence=Evidence(location=blank_to_none(location)),
                ),
                employee_name=name,
                photo=photo,
                max_sessions=self._max_sessions,
            )
            logger.info("user %s opened session %s as %s", user_id, created.session_number, created.status.value)
            return created

    def break_start(
        self,
        user_id: int,
        *,
        photo: Optional[PhotoUpload] = None,
        location: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceSession:
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            self._check(sessions, SessionEvent.BREAK_START)
            active = active_session(sessions)

            changes = SessionUpdate(break_start=now)
            if active.break_end is not None:
                # One break slot per row: bank the finished cycle before reusing it.
                changes = replace(
                    changes,
                    earlier_break_mins=active.earlier_break_mins + minutes_between(active.break_start, active.break_end),
                    clear_break_end=True,
                )
                logger.info("user %s starts another break in session %s", user_id, active.session_number)

            evidence = self._capture(user_id, photo, location, EvidenceAction.BREAK_START)
            return self._attendance.update_session(active.session_id, replace(changes, break_start_evidence=evidence))

    def break_end(
        self,
        user_id: int,
        *,
        photo: Optional[PhotoUpload] = None,
        location: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceSession:
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            self._check(sessions, SessionEvent.BREAK_END)
            active = active_session(sessions)

            evidence = self._capture(user_id, photo, location, EvidenceAction.BREAK_END)
            return self._attendance.update_session(
                active.session_id,
                SessionUpdate(break_end=now, break_end_evidence=evidence),
            )

    def clock_out(
        self,
        user_id: int,
        *,
        photo: Optional[PhotoUpload] = None,
        location: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceSession:
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            self._check(sessions, SessionEvent.CLOCK_OUT)
            active = active_session(sessions)

            evidence = self._capture(user_id, photo, location, EvidenceAction.CLOCK_OUT)
            closed = self._attendance.update_session(
                active.session_id,
                SessionUpdate(check_out=now, check_out_evidence=evidence),
            )
            logger.info("user %s closed session %s", user_id, closed.session_number)
            return closed

    def permit(
        self,
        user_id: int,
        *,
        permit_type: str | PermitType,
        notes: Optional[str] = None,
        photo: Optional[PhotoUpload] = None,
        location: Optional[str] = None,
        now: datetime | None = None,
    ) -> AttendanceSession:
        """Record a sick/permission permit.

        - nothing recorded today: a permit session occupies the day;
        - a session is open: it is closed now as an early exit;
        - otherwise the latest session is re-labelled, its check-out untouched.
        """

        try:
            ptype = PermitType(permit_type)
        except ValueError:
            raise ValidationError("Jenis izin tidak valid (sick/permission)")

        notes = blank_to_none(notes)
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            state = derive_state(sessions)
            self._check(sessions, SessionEvent.PERMIT)
            name = self._employee_name(user_id)

            if state == SessionState.NO_SESSION:
                created = self._open_session(
                    NewSession(
                        user_id=user_id,
                        business_date=today,
                        status=ptype.status,
                        check_in=now,
                        notes=notes,
                        check_in_evidence=Evidence(location=blank_to_none(location)),
                    ),
                    employee_name=name,
                    photo=photo,
                    max_sessions=1,
                )
                logger.info("user %s declared %s for %s", user_id, ptype.value, today)
                return created

            if state in (SessionState.OPEN, SessionState.ON_BREAK):
                active = active_session(sessions)
                evidence = self._capture(user_id, photo, location, EvidenceAction.CLOCK_IN, employee_name=name)
                logger.info("user %s early exit (%s) from session %s", user_id, ptype.value, active.session_number)
                return self._attendance.update_session(
                    active.session_id,
                    SessionUpdate(
                        status=ptype.status,
                        notes=notes,
                        check_out=now,
                        permit_exit_at=now,
                        check_out_evidence=evidence,
                    ),
                )

            target = active_session(sessions) or sessions[-1]
            return self._attendance.update_session(
                target.session_id,
                SessionUpdate(status=ptype.status, notes=notes),
            )

    def resume(self, user_id: int, *, now: datetime | None = None) -> AttendanceSession:
        """Open a follow-up session after the day's earlier sessions were closed.

        The prior session's ``permit_resume_at`` is left untouched.
        """

        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            self._check(sessions, SessionEvent.RESUME)
            self._check_limit(sessions)

            next_number = len(sessions) + 1
            decision = self._factory.for_resume().decide(minutes_of_day=self._clock.minutes_of_day(now))

            created = self._create(
                NewSession(
                    user_id=user_id,
                    business_date=today,
                    status=decision.status,
                    check_in=now,
                    shift=DEFAULT_SHIFT,
                    notes=f"Sesi ke-{next_number}",
                ),
                max_sessions=self._max_sessions,
            )
            logger.info("user %s resumed with session %s", user_id, created.session_number)
            return created

    def today(self, user_id: int, *, now: datetime | None = None) -> list[AttendanceSession]:
        now = now or now_utc()
        today = self._clock.business_date(now)

        with self._locks.hold(user_id):
            sessions = self._resolver.sessions_for_day(user_id, today)
            if not sessions:
                self._sweeper.sweep(user_id, now=now)
            return sessions

    def day_summary(self, user_id: int, *, now: datetime | None = None) -> DaySummary:
        now = now or now_utc()
        sessions = self.today(user_id, now=now)
        state = derive_state(sessions)
        return DaySummary(
            business_date=self._clock.business_date(now),
            state=state,
            sessions=sessions,
            totals=aggregate(sessions),
            allowed=allowed_events(state),
        )

    def history(
        self,
        *,
        user_id: Optional[int] = None,
        month: Optional[str] = None,
        day: Optional[str] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> Sequence[AttendanceSession]:
        """Sessions newest first, narrowed to a business day (`YYYY-MM-DD`) or a month (`YYYY-MM`)."""
        start = end = None
        if day:
            start = end = parse_iso_date(day)
        elif month:
            start, end = parse_month(month)
        return self._attendance.list_history(user_id=user_id, start_date=start, end_date=end, limit=limit)

    def business_date(self, now: datetime | None = None) -> date:
        return self._clock.business_date(now or now_utc())
