from datetime import date

from src.hrms_payroll.hrms_payroll.attendance.aggregator import (
    AttendanceAggregator,
    attendance_percentage,
    summarize_month,
)
from src.hrms_payroll.hrms_payroll.core.enums import AttendanceStatus
from tests.fakes import FakeAttendanceRepo


def _seed(repo, user_id, year, month, statuses):
    for day, status in enumerate(statuses, start=1):
        repo.add(user_id, date(year, month, day), status)


def test_monthly_counts_and_percentage():
    repo = FakeAttendanceRepo()
    _seed(repo, 1, 2024, 3, [AttendanceStatus.PRESENT] * 18 + [AttendanceStatus.HALF_DAY] * 2 + [AttendanceStatus.ABSENT] * 2)

    summary = AttendanceAggregator(repo).monthly(1, 3, 2024)

    assert summary.total_days == 22
    assert summary.present_days == 18
    assert summary.half_days == 2
    assert summary.absent_days == 2
    assert summary.late_days == 0
    assert summary.attendance_percentage == 91


def test_counts_always_add_up_to_total():
    repo = FakeAttendanceRepo()
    statuses = [AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT, AttendanceStatus.HALF_DAY] * 5
    _seed(repo, 7, 2024, 5, statuses)

    s = AttendanceAggregator(repo).monthly(7, 5, 2024)

    assert s.present_days + s.absent_days + s.half_days + s.late_days == s.total_days == 20


def test_no_records_gives_zero_percentage():
    summary = AttendanceAggregator(FakeAttendanceRepo()).monthly(1, 2, 2024)
    assert summary.total_days == 0
    assert summary.attendance_percentage == 0


def test_only_records_of_the_requested_month_and_user_count():
    repo = FakeAttendanceRepo()
    repo.add(1, date(2024, 3, 31), AttendanceStatus.PRESENT)
    repo.add(1, date(2024, 4, 1), AttendanceStatus.PRESENT)
    repo.add(1, date(2023, 4, 2), AttendanceStatus.PRESENT)
    repo.add(2, date(2024, 4, 2), AttendanceStatus.PRESENT)

    assert AttendanceAggregator(repo).monthly(1, 4, 2024).total_days == 1


def test_same_day_records_are_not_deduplicated():
    records = FakeAttendanceRepo()
    records.add(1, date(2024, 3, 4), AttendanceStatus.PRESENT)
    records.add(1, date(2024, 3, 4), AttendanceStatus.LATE)

    s = summarize_month(1, records.list_all(), month=3, year=2024)

    assert s.total_days == 2


def test_percentage_rounds_half_up():
    assert attendance_percentage(1, 8) == 13  # 12.5
    assert attendance_percentage(1, 3) == 33
    assert attendance_percentage(2, 3) == 67
    assert attendance_percentage(3, 0) == 0
