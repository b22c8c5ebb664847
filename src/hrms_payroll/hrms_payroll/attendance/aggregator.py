from __future__ import annotations

import math
from typing import Iterable

from ..common.datetime_utils import require_month
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, MonthlyAttendance
from .repository import AttendanceRepository


def attendance_percentage(attended_days: int, total_days: int) -> int:
    """round(100 * attended / total), half up; 0 when there are no records."""
    if total_days <= 0:
        return 0
    return int(math.floor(100 * attended_days / total_days + 0.5))


def summarize_month(user_id: int, records: Iterable[AttendanceRecord], *, month: int, year: int) -> MonthlyAttendance:
    """Count statuses of the records whose stored date falls in month/year.

    Several records on the same day are all counted; cleaning them up is a
    maintenance job (see ``maintenance.find_duplicate_records``).
    """
    counts = {status: 0 for status in AttendanceStatus}
    total = 0
    for r in records:
        if r.work_date.month != month or r.work_date.year != year:
            continue
        counts[r.status] += 1
        total += 1

    present = counts[AttendanceStatus.PRESENT]
    half = counts[AttendanceStatus.HALF_DAY]
    return MonthlyAttendance(
        user_id=int(user_id),
        month=int(month),
        year=int(year),
        total_days=total,
        present_days=present,
        absent_days=counts[AttendanceStatus.ABSENT],
        half_days=half,
        late_days=counts[AttendanceStatus.LATE],
        attendance_percentage=attendance_percentage(present + half, total),
    )


class AttendanceAggregator:
    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def monthly(self, user_id: int, month: int, year: int) -> MonthlyAttendance:
        month = require_month(month)
        records = self._attendance.list_for_user(int(user_id))
        return summarize_month(int(user_id), records, month=month, year=int(year))
