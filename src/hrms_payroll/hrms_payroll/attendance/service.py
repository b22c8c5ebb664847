from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.events import ChangeFeed
from ..core.constants import COLLECTION_ATTENDANCE
from ..core.enums import AttendanceStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._feed = feed
        self._clock = clock

    def check_in(self, user_id: int, *, now: datetime | None = None, location: Optional[str] = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        existing = self._attendance.get_for_user_and_date(int(user_id), today)
        if existing:
            raise ConflictError("Already checked in today")

        decision = self._factory.for_checkin(now=now).decide_checkin(now=now)
        self._attendance.create(
            user_id=int(user_id),
            work_date=today,
            status=decision.status,
            check_in_time=now,
            check_in_location=location,
            remarks=decision.remarks,
        )
        logger.info("User %s checked in (%s)", user_id, decision.status.value)
        return self._reload_and_publish(int(user_id), today)

    def check_out(self, user_id: int, *, now: datetime | None = None, location: Optional[str] = None) -> AttendanceRecord:
        now = now or self._clock()
        today = now.date()

        record = self._attendance.get_for_user_and_date(int(user_id), today)
        if not record:
            raise NotFoundError("No check-in found for today")
        if record.check_out_time is not None:
            raise ConflictError("Already checked out today")

        strategy = self._factory.for_checkout(now=now, check_in_time=record.check_in_time, current_status=record.status)
        decision = strategy.decide_checkout(now=now, check_in_time=record.check_in_time, current=record.status)

        ok = self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=now,
            status=decision.status,
            check_out_location=location,
        )
        if not ok:
            raise NotFoundError("Attendance record no longer exists")
        logger.info("User %s checked out (%s)", user_id, decision.status.value)
        return self._reload_and_publish(int(user_id), today)

    def mark(
        self,
        user_id: int,
        *,
        work_date: date,
        status: AttendanceStatus,
        remarks: Optional[str] = None,
    ) -> AttendanceRecord:
        """Admin marking: set the day's status, creating the record when missing."""
        if work_date > self._clock().date():
            raise ValidationError("Cannot mark attendance for a future date")

        record = self._attendance.get_for_user_and_date(int(user_id), work_date)
        if record:
            self._attendance.update_status(attendance_id=record.attendance_id, status=status, remarks=remarks)
        else:
            self._attendance.create(user_id=int(user_id), work_date=work_date, status=status, remarks=remarks)
        return self._reload_and_publish(int(user_id), work_date)

    def get_for_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_user_and_date(int(user_id), work_date)

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        return self._attendance.list_for_user(int(user_id))

    def list_all(self) -> Sequence[AttendanceRecord]:
        return self._attendance.list_all()

    def _reload_and_publish(self, user_id: int, work_date: date) -> AttendanceRecord:
        record = self._attendance.get_for_user_and_date(user_id, work_date)
        if not record:
            raise NotFoundError("Attendance record not found after write")
        if self._feed:
            self._feed.publish(COLLECTION_ATTENDANCE, record)
        return record
