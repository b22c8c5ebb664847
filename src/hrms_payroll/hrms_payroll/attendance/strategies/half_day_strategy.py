from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class HalfDayStrategy(AttendanceStrategy):
    """Short day: checked out before the half-day threshold was reached."""

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, now: datetime, check_in_time: Optional[datetime], current: AttendanceStatus) -> StatusDecision:
        worked = ""
        if check_in_time:
            minutes = int((now - check_in_time).total_seconds() // 60)
            worked = f" ({minutes // 60:02d}:{minutes % 60:02d} worked)"
        return StatusDecision(status=AttendanceStatus.HALF_DAY, remarks=f"Half day{worked}")
