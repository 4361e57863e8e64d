from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceSession, NewSession, SessionUpdate


class AttendanceRepository(Protocol):
    def list_for_user_and_date(self, user_id: int, business_date: date) -> Sequence[AttendanceSession]:
        """Sessions of one business day ordered by session number."""

        raise NotImplementedError

    def get_by_id(self, session_id: int) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def create_if_no_open(self, new: NewSession, *, max_sessions: int) -> Optional[AttendanceSession]:
        """Insert ``new`` only if the day has no open session and fewer than ``max_sessions``.

        The check and the insert are a single atomic statement. The session number is
        assigned as the day's session count + 1. Returns None when the insert is refused.
        """

        raise NotImplementedError

    def update_session(self, session_id: int, changes: SessionUpdate) -> AttendanceSession:
        raise NotImplementedError

    def list_history(
        self,
        *,
        user_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 500,
    ) -> Sequence[AttendanceSession]:
        """Newest first."""

        raise NotImplementedError

    def count_users_working_on(self, business_date: date) -> int:
        """Distinct users with a present/late session on ``business_date``."""

        raise NotImplementedError
