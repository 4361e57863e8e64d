from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import BUSINESS_TIMEZONE, DAY_CUTOVER_HOUR
from ..core.exceptions import ValidationError


def now_utc() -> datetime:
    """Current instant (aware, UTC).

    Note: Wrapped so tests can patch/mock easier.
    """
    return datetime.now(timezone.utc)


def as_utc(instant: datetime) -> datetime:
    """Attach UTC to naive values (the database stores naive UTC)."""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant.astimezone(timezone.utc)


def to_naive_utc(instant: Optional[datetime]) -> Optional[datetime]:
    if instant is None:
        return None
    return as_utc(instant).replace(tzinfo=None)


@dataclass(frozen=True)
class BusinessClock:
    """Resolves which business day an instant belongs to.

    A business day runs from ``cutover_hour`` local time to ``cutover_hour`` on the
    next calendar day, so a night shift is attributed to the day it started.
    """

    tz_name: str = BUSINESS_TIMEZONE
    cutover_hour: int = DAY_CUTOVER_HOUR

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.tz_name)

    def to_local(self, instant: datetime) -> datetime:
        return as_utc(instant).astimezone(self.tz)

    def business_date(self, instant: datetime) -> date:
        local = self.to_local(instant)
        if local.hour < self.cutover_hour:
            return local.date() - timedelta(days=1)
        return local.date()

    def cutover_instant(self, business_date: date) -> datetime:
        """The instant at which ``business_date`` ends (UTC)."""
        next_day = business_date + timedelta(days=1)
        local = datetime.combine(next_day, time(hour=self.cutover_hour), tzinfo=self.tz)
        return local.astimezone(timezone.utc)

    def minutes_of_day(self, instant: datetime) -> int:
        local = self.to_local(instant)
        return local.hour * 60 + local.minute

    def is_past_cutover(self, instant: datetime) -> bool:
        return self.to_local(instant).hour >= self.cutover_hour


DEFAULT_CLOCK = BusinessClock()


def business_date(instant: datetime) -> date:
    return DEFAULT_CLOCK.business_date(instant)


def minutes_between(start: Optional[datetime], end: Optional[datetime]) -> int:
    """Whole minutes from start to end; 0 when either side is missing."""
    if start is None or end is None:
        return 0
    return int((as_utc(end) - as_utc(start)).total_seconds() // 60)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Format tanggal tidak valid (YYYY-MM-DD)")


def parse_month(value: str) -> tuple[date, date]:
    """Parse YYYY-MM into the first and last day of that month."""
    try:
        first = datetime.strptime(value, "%Y-%m").date()
    except ValueError:
        raise ValidationError("Format bulan tidak valid (YYYY-MM)")
    last = first.replace(day=monthrange(first.year, first.month)[1])
    return first, last


def parse_optional_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp from a form field; blank means None."""
    v = (value or "").strip()
    if not v:
        return None
    try:
        return as_utc(datetime.fromisoformat(v.replace("Z", "+00:00")))
    except ValueError:
        raise ValidationError("Format waktu tidak valid")
