from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import RESUME_LATE_AFTER_MINUTES
from ..shifts.model import DEFAULT_SHIFT_RULES, ShiftRule, rule_for
from .strategies.base import LatenessStrategy
from .strategies.present_strategy import PresentStrategy
from .strategies.threshold_strategy import ThresholdStrategy


@dataclass
class LatenessStrategyFactory:
    """Factory Pattern: choose the lateness strategy for a new session."""

    shift_rules: dict[str, ShiftRule] = field(default_factory=lambda: dict(DEFAULT_SHIFT_RULES))
    resume_late_after_minutes: int = RESUME_LATE_AFTER_MINUTES

    def for_clock_in(self, *, shift: Optional[str]) -> LatenessStrategy:
        rule = rule_for(shift, self.shift_rules)
        if rule.late_after_minutes is None:
            return PresentStrategy()
        return ThresholdStrategy(rule.late_after_minutes)

    def for_resume(self) -> LatenessStrategy:
        return ThresholdStrategy(self.resume_late_after_minutes)
