from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from .model import AttendanceSession
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def active_session(sessions: Sequence[AttendanceSession]) -> Optional[AttendanceSession]:
    """The session without a check-out, if any.

    More than one open session is a data anomaly; the first one (lowest session
    number) wins and a warning is logged.
    """

    open_sessions = [s for s in sessions if s.is_open]
    if not open_sessions:
        return None
    if len(open_sessions) > 1:
        logger.warning(
            "user %s has %d open sessions on %s, using session %s",
            open_sessions[0].user_id,
            len(open_sessions),
            open_sessions[0].business_date,
            open_sessions[0].session_number,
        )
    return open_sessions[0]


class SessionResolver:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def sessions_for_day(self, user_id: int, business_date: date) -> list[AttendanceSession]:
        sessions = self._attendance.list_for_user_and_date(user_id, business_date)
        return sorted(sessions, key=lambda s: s.session_number)

    def active_for_day(self, user_id: int, business_date: date) -> Optional[AttendanceSession]:
        return active_session(self.sessions_for_day(user_id, business_date))
