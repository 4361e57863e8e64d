from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ...core.enums import AttendanceStatus


@dataclass(frozen=True)
class StatusDecision:
    status: AttendanceStatus
    note: Optional[str] = None


class LatenessStrategy(ABC):
    """Strategy Pattern: encapsulate how a new session's status is decided."""

    @abstractmethod
    def decide(self, *, minutes_of_day: int) -> StatusDecision:
        raise NotImplementedError
