from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import SHIFT_1_LATE_AFTER_MINUTES, SHIFT_2_LATE_AFTER_MINUTES


@dataclass(frozen=True)
class ShiftRule:
    """A shift label and the minute of day after which a clock-in counts as late.

    ``late_after_minutes`` of None means no lateness threshold applies.
    """

    name: str
    late_after_minutes: Optional[int] = None


SHIFT_1 = ShiftRule("Shift 1", SHIFT_1_LATE_AFTER_MINUTES)
SHIFT_2 = ShiftRule("Shift 2", SHIFT_2_LATE_AFTER_MINUTES)
SHIFT_3 = ShiftRule("Shift 3")
LONG_SHIFT = ShiftRule("Long Shift")
MANAGEMENT = ShiftRule("Management")

DEFAULT_SHIFT_RULES: dict[str, ShiftRule] = {r.name: r for r in (SHIFT_1, SHIFT_2, SHIFT_3, LONG_SHIFT, MANAGEMENT)}


def rule_for(name: Optional[str], rules: Optional[dict[str, ShiftRule]] = None) -> ShiftRule:
    """Look up a shift rule; unknown labels get no threshold."""
    rules = DEFAULT_SHIFT_RULES if rules is None else rules
    if not name:
        return MANAGEMENT
    return rules.get(name) or ShiftRule(name)
