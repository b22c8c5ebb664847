from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def __init__(self, minutes_late: int = 0):
        self._minutes_late = int(minutes_late)

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        remarks = f"Late by {self._minutes_late} min" if self._minutes_late > 0 else None
        return StatusDecision(status=AttendanceStatus.LATE, remarks=remarks)

    def decide_checkout(self, *, now: datetime, check_in_time: Optional[datetime], current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
