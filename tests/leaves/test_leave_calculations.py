from datetime import date, datetime

from src.hrms_payroll.hrms_payroll.core.enums import LeaveStatus, LeaveType
from src.hrms_payroll.hrms_payroll.leaves.calculations import (
    days_requested,
    has_leave_balance,
    leaves_used,
    remaining_leaves,
)
from src.hrms_payroll.hrms_payroll.leaves.model import LeaveRequest


def test_days_requested_is_inclusive():
    assert days_requested(date(2024, 3, 1), date(2024, 3, 3)) == 3
    assert days_requested(date(2024, 3, 1), date(2024, 3, 1)) == 1


def test_days_requested_rounds_partial_days_up():
    assert days_requested(datetime(2024, 3, 1, 9, 0), datetime(2024, 3, 2, 13, 0)) == 3


def test_days_requested_across_month_end():
    assert days_requested(date(2024, 2, 28), date(2024, 3, 1)) == 3


def _req(status, start, end):
    return LeaveRequest(
        request_id=1,
        user_id=1,
        leave_type=LeaveType.CASUAL,
        start_date=start,
        end_date=end,
        reason="x",
        status=status,
    )


def test_leaves_used_counts_only_approved():
    requests = [
        _req(LeaveStatus.APPROVED, date(2024, 1, 1), date(2024, 1, 2)),
        _req(LeaveStatus.PENDING, date(2024, 2, 1), date(2024, 2, 5)),
        _req(LeaveStatus.REJECTED, date(2024, 3, 1), date(2024, 3, 5)),
        _req(LeaveStatus.APPROVED, date(2024, 4, 1), date(2024, 4, 1)),
    ]
    assert leaves_used(requests) == 3


def test_remaining_and_has_balance():
    assert remaining_leaves(12, 15) == 0
    assert remaining_leaves(12, 3) == 9
    assert has_leave_balance(3, 3)
    assert not has_leave_balance(4, 3)
