from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..common.datetime_utils import DEFAULT_CLOCK, BusinessClock
from ..core.constants import AUTO_CLOSE_NOTE
from .model import AttendanceSession, SessionUpdate
from .repository import AttendanceRepository
from .resolver import SessionResolver

logger = logging.getLogger(__name__)


def auto_close_note(existing: Optional[str]) -> str:
    if existing:
        return f"{existing} ({AUTO_CLOSE_NOTE})"
    return AUTO_CLOSE_NOTE


class AutoCloseSweeper:
    """Closes a session left open on the previous business date.

    Pull based: runs when today's sessions are queried, not on a timer. The stale
    session gets the previous day's cutover instant as its check-out.
    """

    def __init__(self, attendance: AttendanceRepository, *, clock: BusinessClock = DEFAULT_CLOCK):
        self._attendance = attendance
        self._resolver = SessionResolver(attendance)
        self._clock = clock

    def sweep(self, user_id: int, *, now: datetime) -> Optional[AttendanceSession]:
        previous = self._clock.business_date(now) - timedelta(days=1)
        stale = self._resolver.active_for_day(user_id, previous)
        if stale is None:
            return None
        if not self._clock.is_past_cutover(now):
            return None

        closed = self._attendance.update_session(
            stale.session_id,
            SessionUpdate(
                check_out=self._clock.cutover_instant(previous),
                notes=auto_close_note(stale.notes),
            ),
        )
        logger.info(
            "auto-closed session %s of user %s from %s",
            stale.session_number,
            user_id,
            previous.isoformat(),
        )
        return closed
