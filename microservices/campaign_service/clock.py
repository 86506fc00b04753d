"""
Lifecycle Clock

Timezone-aware "now" and calendar-day boundaries used by eligibility
checks and transition timestamps.
"""

from datetime import date, datetime, time, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


class LifecycleClock:
    """Clock pinned to the timezone the lifecycle jobs run in"""

    def __init__(
        self,
        tz_name: str = "Asia/Ho_Chi_Minh",
        now_fn: Optional[Callable[[], datetime]] = None,
    ):
        self.tz = ZoneInfo(tz_name)
        self._now_fn = now_fn or (lambda: datetime.now(timezone.utc))

    def now(self) -> datetime:
        return self._now_fn().astimezone(self.tz)

    def utcnow(self) -> datetime:
        return self._now_fn().astimezone(timezone.utc)

    def today(self) -> date:
        return self.now().date()

    def start_of_day(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.tz)

    def end_of_day(self, day: date) -> datetime:
        return datetime.combine(day, time.max, tzinfo=self.tz)

    def days_until(self, day: date) -> int:
        """Whole calendar days from today to `day` (negative once passed)"""
        return (day - self.today()).days

    def shift(self, day: date, days: int) -> date:
        return day + timedelta(days=days)


__all__ = ["LifecycleClock"]
