from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_in_location: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_out_location: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, remarks: Optional[str] = None) -> bool:
        """Admin override of a day's status."""

        raise NotImplementedError

    def delete_many(self, attendance_ids: Sequence[int]) -> int:
        """Maintenance only (duplicate cleanup); never used by the normal flow."""

        raise NotImplementedError
