from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance record per user per calendar day."""

    attendance_id: int
    user_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: Optional[datetime] = None
    check_out_time: Optional[datetime] = None
    check_in_location: Optional[str] = None
    check_out_location: Optional[str] = None
    remarks: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "userId": self.user_id,
            "date": self.work_date.isoformat(),
            "checkInTime": _iso(self.check_in_time),
            "checkOutTime": _iso(self.check_out_time),
            "status": self.status.value,
            "checkInLocation": self.check_in_location,
            "checkOutLocation": self.check_out_location,
            "remarks": self.remarks,
        }


@dataclass(frozen=True)
class MonthlyAttendance:
    """Read-model: per-month counts for one user."""

    user_id: int
    month: int
    year: int
    total_days: int
    present_days: int
    absent_days: int
    half_days: int
    late_days: int
    attendance_percentage: int

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "month": self.month,
            "year": self.year,
            "totalDays": self.total_days,
            "presentDays": self.present_days,
            "absentDays": self.absent_days,
            "halfDays": self.half_days,
            "lateDays": self.late_days,
            "attendancePercentage": self.attendance_percentage,
        }
