from __future__ import annotations

from datetime import datetime

import pytest

from src.hrms_payroll.hrms_payroll.container import wire_container
from src.hrms_payroll.hrms_payroll.leaves.policy_service import default_policies
from tests.fakes import (
    FakeAttendanceRepo,
    FakeLeaveBalanceRepo,
    FakeLeavePolicyRepo,
    FakeLeaveRequestRepo,
    FakeSalaryConfigRepo,
    FakeSalaryRepo,
    FixedClock,
)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 15, 10, 0))


@pytest.fixture
def container(clock):
    return wire_container(
        attendance_repo=FakeAttendanceRepo(),
        leave_request_repo=FakeLeaveRequestRepo(),
        leave_policy_repo=FakeLeavePolicyRepo(default_policies()),
        leave_balance_repo=FakeLeaveBalanceRepo(),
        salary_repo=FakeSalaryRepo(),
        salary_config_repo=FakeSalaryConfigRepo(),
        clock=clock,
    )
