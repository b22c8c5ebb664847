from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class PresentStrategy(AttendanceStrategy):
    """Default rule: checking in marks the day present; checking out keeps the status."""

    def decide_checkin(self, *, now: datetime) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.PRESENT)

    def decide_checkout(self, *, now: datetime, check_in_time: Optional[datetime], current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
