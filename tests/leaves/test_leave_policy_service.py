import pytest

from src.hrms_payroll.hrms_payroll.common.cache import EntityCache
from src.hrms_payroll.hrms_payroll.core.enums import LeaveType
from src.hrms_payroll.hrms_payroll.core.exceptions import ValidationError
from src.hrms_payroll.hrms_payroll.leaves.model import LeavePolicy
from src.hrms_payroll.hrms_payroll.leaves.policy_service import LeavePolicyService
from tests.fakes import FakeLeavePolicyRepo


def test_initialize_defaults_only_when_empty():
    repo = FakeLeavePolicyRepo()
    svc = LeavePolicyService(repo)

    created = svc.initialize_default_policies()

    assert len(created) == 6
    sick = svc.get_policy(LeaveType.SICK)
    assert (sick.allowed_days_per_year, sick.carry_forward_days) == (12, 3)
    assert svc.get_policy(LeaveType.EARNED).carry_forward_days == 90
    assert svc.initialize_default_policies() == []


def test_get_policy_is_cached_and_invalidated_on_write():
    repo = FakeLeavePolicyRepo([LeavePolicy(leave_type=LeaveType.SICK, allowed_days_per_year=12)])
    svc = LeavePolicyService(repo, cache=EntityCache(ttl_seconds=60))

    svc.get_policy(LeaveType.SICK)
    svc.get_policy(LeaveType.SICK)
    assert repo.get_calls == 1

    svc.set_policy(LeavePolicy(leave_type=LeaveType.SICK, allowed_days_per_year=15))
    assert svc.get_policy(LeaveType.SICK).allowed_days_per_year == 15
    assert repo.get_calls == 2


def test_set_policy_rejects_negative_days():
    svc = LeavePolicyService(FakeLeavePolicyRepo())
    with pytest.raises(ValidationError):
        svc.set_policy(LeavePolicy(leave_type=LeaveType.SICK, allowed_days_per_year=-1))
