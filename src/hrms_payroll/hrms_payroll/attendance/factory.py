from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Optional

from ..core.constants import DEFAULT_LATE_GRACE_MINUTES
from ..core.enums import AttendanceStatus
from .strategies.base import AttendanceStrategy
from .strategies.half_day_strategy import HalfDayStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.present_strategy import PresentStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    Without ``workday_start`` every check-in counts as present; without
    ``half_day_hours`` check-out never downgrades the day.
    """

    workday_start: Optional[time] = None
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    half_day_hours: Optional[float] = None

    def for_checkin(self, *, now: datetime) -> AttendanceStrategy:
        if not self.workday_start:
            return PresentStrategy()

        start = datetime.combine(now.date(), self.workday_start)
        if now <= start + timedelta(minutes=int(self.grace_minutes)):
            return PresentStrategy()
        return LateStrategy(minutes_late=int((now - start).total_seconds() // 60))

    def for_checkout(
        self,
        *,
        now: datetime,
        check_in_time: Optional[datetime],
        current_status: AttendanceStatus,
    ) -> AttendanceStrategy:
        if not self.half_day_hours or not check_in_time:
            return PresentStrategy()
        if current_status not in {AttendanceStatus.PRESENT, AttendanceStatus.LATE}:
            return PresentStrategy()

        if now - check_in_time < timedelta(hours=float(self.half_day_hours)):
            return HalfDayStrategy()
        return PresentStrategy()
