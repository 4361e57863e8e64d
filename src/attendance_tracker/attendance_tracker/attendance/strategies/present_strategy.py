from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import LatenessStrategy, StatusDecision


class PresentStrategy(LatenessStrategy):
    """Shifts without a late threshold: always present."""

    def decide(self, *, minutes_of_day: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)
