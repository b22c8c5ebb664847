from __future__ import annotations

from datetime import date, datetime

import pytest

from src.hrms_payroll.hrms_payroll.core.enums import LeaveType
from src.hrms_payroll.hrms_payroll.core.exceptions import ValidationError
from src.hrms_payroll.hrms_payroll.leaves.balance import LeaveBalanceTracker
from src.hrms_payroll.hrms_payroll.leaves.model import LeaveBalance, LeavePolicy
from src.hrms_payroll.hrms_payroll.leaves.policy_service import LeavePolicyService
from tests.fakes import FakeLeaveBalanceRepo, FakeLeavePolicyRepo, FakeLeaveRequestRepo, FixedClock


def _tracker(policies=(), repo=None, requests=None):
    repo = repo or FakeLeaveBalanceRepo()
    policy_service = LeavePolicyService(FakeLeavePolicyRepo(policies))
    tracker = LeaveBalanceTracker(repo, policy_service, requests=requests, clock=FixedClock(datetime(2024, 6, 1)))
    return tracker, repo


SICK = LeavePolicy(leave_type=LeaveType.SICK, allowed_days_per_year=12, carry_forward_days=3)
CASUAL = LeavePolicy(leave_type=LeaveType.CASUAL, allowed_days_per_year=10)


def test_initialize_seeds_one_balance_per_policy():
    tracker, _ = _tracker([SICK, CASUAL])

    created = tracker.initialize_for_user(1)

    assert {b.leave_type for b in created} == {LeaveType.SICK, LeaveType.CASUAL}
    sick = tracker.get_balance(1, LeaveType.SICK, 2024)
    assert (sick.total_allowed, sick.used, sick.remaining, sick.carry_forward) == (12, 0, 12, 0)
    assert tracker.total_allowed_days(1) == 22


def test_initialize_is_idempotent():
    tracker, repo = _tracker([SICK])
    tracker.initialize_for_user(1)
    tracker.record_usage(1, LeaveType.SICK, 2024, 2)

    assert tracker.initialize_for_user(1) == []
    assert repo.get(user_id=1, leave_type=LeaveType.SICK, year=2024).used == 2


def test_set_balance_is_a_full_replace():
    tracker, _ = _tracker([SICK])
    tracker.initialize_for_user(1)

    replaced = LeaveBalance(user_id=1, leave_type=LeaveType.SICK, year=2024, total_allowed=20, used=1, remaining=5)
    tracker.set_balance(replaced)

    # remaining is stored as given, not recomputed
    assert tracker.get_balance(1, LeaveType.SICK, 2024) == replaced


def test_set_balance_rejects_negative_counters():
    tracker, _ = _tracker()
    with pytest.raises(ValidationError):
        tracker.set_balance(LeaveBalance(user_id=1, leave_type=LeaveType.SICK, year=2024, total_allowed=-1, used=0, remaining=0))


def test_record_usage_on_existing_balance():
    tracker, _ = _tracker([SICK])
    tracker.initialize_for_user(1)

    balance = tracker.record_usage(1, LeaveType.SICK, 2024, 3)

    assert (balance.used, balance.remaining) == (3, 9)


def test_record_usage_without_policy_starts_from_zero():
    tracker, _ = _tracker()

    balance = tracker.record_usage(1, LeaveType.UNPAID, 2024, 2)

    assert (balance.total_allowed, balance.used, balance.remaining) == (0, 2, -2)


def test_record_usage_falls_back_to_increment_when_create_races():
    class RacingRepo(FakeLeaveBalanceRepo):
        """Another approval inserts the row between our increment and create."""

        def create_if_absent(self, balance):
            self.balances[self._key(balance.user_id, balance.leave_type, balance.year)] = LeaveBalance.fresh(
                user_id=balance.user_id, leave_type=balance.leave_type, year=balance.year, total_allowed=12
            ).with_usage(1)
            return False

    tracker, repo = _tracker([SICK], repo=RacingRepo())

    balance = tracker.record_usage(1, LeaveType.SICK, 2024, 3)

    assert (balance.used, balance.remaining) == (4, 8)


def _approved(requests, start, end, *, leave_type=LeaveType.SICK, approved_on=datetime(2024, 5, 2)):
    rid = requests.create(user_id=1, leave_type=leave_type, start_date=start, end_date=end, reason="Flu")
    requests.mark_approved(request_id=rid, approved_by=None, approved_date=approved_on, total_days=0)
    return rid


def test_reconcile_rebuilds_used_from_approved_requests():
    requests = FakeLeaveRequestRepo()
    _approved(requests, date(2024, 5, 1), date(2024, 5, 3))
    _approved(requests, date(2024, 5, 20), date(2024, 5, 20))
    _approved(requests, date(2024, 5, 6), date(2024, 5, 7), leave_type=LeaveType.CASUAL)
    _approved(requests, date(2023, 12, 28), date(2023, 12, 29), approved_on=datetime(2023, 12, 1))
    requests.create(user_id=1, leave_type=LeaveType.SICK, start_date=date(2024, 6, 3), end_date=date(2024, 6, 4), reason="x")

    tracker, repo = _tracker([SICK], requests=requests)
    repo.replace(LeaveBalance(user_id=1, leave_type=LeaveType.SICK, year=2024, total_allowed=12, used=9, remaining=5, carry_forward=2))

    balance = tracker.reconcile(1, LeaveType.SICK, 2024)

    assert (balance.total_allowed, balance.used, balance.remaining, balance.carry_forward) == (12, 4, 10, 2)
    assert repo.get(user_id=1, leave_type=LeaveType.SICK, year=2024) == balance


def test_reconcile_without_balance_starts_from_policy():
    requests = FakeLeaveRequestRepo()
    _approved(requests, date(2024, 5, 1), date(2024, 5, 2))
    tracker, _ = _tracker([SICK], requests=requests)

    balance = tracker.reconcile(1, LeaveType.SICK, 2024)

    assert (balance.total_allowed, balance.used, balance.remaining) == (12, 2, 10)


def test_reconcile_needs_request_repository():
    tracker, _ = _tracker([SICK])
    with pytest.raises(RuntimeError):
        tracker.reconcile(1, LeaveType.SICK, 2024)
