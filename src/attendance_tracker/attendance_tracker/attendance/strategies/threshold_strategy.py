from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import LatenessStrategy, StatusDecision


class ThresholdStrategy(LatenessStrategy):
    """Late when the local minute of day is strictly after ``late_after_minutes``."""

    def __init__(self, late_after_minutes: int):
        self.late_after_minutes = int(late_after_minutes)

    def decide(self, *, minutes_of_day: int) -> StatusDecision:
        if minutes_of_day > self.late_after_minutes:
            return StatusDecision(status=AttendanceStatus.LATE)
        return StatusDecision(status=AttendanceStatus.PRESENT)
