from __future__ import annotations

from datetime import date

import pytest

from src.hrms_payroll.hrms_payroll.core.constants import ABSENT_DEDUCTION_ID
from src.hrms_payroll.hrms_payroll.core.enums import AttendanceStatus, DeductionReason, PaymentStatus
from src.hrms_payroll.hrms_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from src.hrms_payroll.hrms_payroll.salary.model import Allowance, Deduction, SalaryConfig


def _present(container, user_id, days, month=3, year=2024):
    for day in range(1, days + 1):
        container.attendance_repo.add(user_id, date(year, month, day), AttendanceStatus.PRESENT)


def _config(container, user_id=1, **kwargs):
    kwargs.setdefault("base_salary", 30000)
    config = SalaryConfig(user_id=user_id, **kwargs)
    container.salary_config_repo.upsert(config)
    return config


def test_generate_injects_absence_deduction(container):
    _config(container)
    _present(container, 1, 24)

    salary = container.salary_service.generate(1, 3, 2024)

    assert salary.per_day_salary == pytest.approx(1153.846, abs=1e-3)
    assert [d.deduction_id for d in salary.deductions] == [ABSENT_DEDUCTION_ID]
    assert salary.total_deductions == pytest.approx(2307.69, abs=0.01)
    assert salary.net_salary == pytest.approx(27692.31, abs=0.01)
    assert salary.payment_status == PaymentStatus.PENDING


def test_net_salary_invariant(container):
    _config(
        container,
        allowances=(Allowance("hra", "HRA", 4000),),
        deductions=(Deduction("tax", "Tax", 1500, DeductionReason.TAX),),
    )
    _present(container, 1, 20)

    s = container.salary_service.generate(1, 3, 2024)

    assert s.net_salary == pytest.approx(s.base_salary + s.total_allowances - s.total_deductions)


def test_generate_twice_is_conflict_and_keeps_first(container):
    _config(container)
    first = container.salary_service.generate(1, 3, 2024)

    with pytest.raises(ConflictError):
        container.salary_service.generate(1, 3, 2024, base_salary=99999)

    assert container.salary_service.get_salary(1, 3, 2024) == first


def test_generate_without_config_or_base_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.salary_service.generate(1, 3, 2024)


def test_generate_with_explicit_inputs(container):
    _present(container, 2, 26)

    salary = container.salary_service.generate(2, 3, 2024, base_salary=26000, allowances=[Allowance("x", "X", 100)])

    assert salary.deductions == ()
    assert salary.net_salary == pytest.approx(26100)


def test_generate_rejects_bad_month(container):
    _config(container)
    with pytest.raises(ValidationError):
        container.salary_service.generate(1, 13, 2024)


def test_recalculate_overwrites_in_place(container):
    config = _config(container)
    original = container.salary_service.generate(1, 3, 2024)
    container.salary_service.update_payment_status(original.salary_id, PaymentStatus.PAID)
    _present(container, 1, 26)

    updated = container.salary_service.recalculate(1, 3, 2024, config)
    again = container.salary_service.recalculate(1, 3, 2024, config)

    assert updated.salary_id == original.salary_id
    assert updated.deductions == ()
    assert updated.net_salary == pytest.approx(30000)
    assert updated.payment_status == PaymentStatus.PAID
    assert again == updated
    assert len(container.salary_service.list_for_user(1)) == 1


def test_recalculate_replaces_stale_absence_deduction(container):
    stale = Deduction(ABSENT_DEDUCTION_ID, "Absent Deduction", 5000, DeductionReason.ABSENT)
    config = _config(container, deductions=(stale,))
    _present(container, 1, 25)

    salary = container.salary_service.recalculate(1, 3, 2024, config)

    absent = [d for d in salary.deductions if d.deduction_id == ABSENT_DEDUCTION_ID]
    assert len(absent) == 1
    assert absent[0].amount == pytest.approx(30000 / 26)


def test_recalculate_creates_missing_record(container):
    config = _config(container)
    salary = container.salary_service.recalculate(1, 5, 2024, config)
    assert (salary.month, salary.year) == (5, 2024)


def test_set_config_recalculates_current_month(container):
    result = container.salary_service.set_config(SalaryConfig(user_id=1, base_salary=26000))

    assert [o.name for o in result.side_effects] == ["recalculate-salary:2024-03"]
    assert result.side_effects[0].ok
    assert container.salary_service.get_salary(1, 3, 2024).base_salary == 26000


def test_set_config_invalidates_cached_config(container):
    container.salary_service.set_config(SalaryConfig(user_id=1, base_salary=26000))
    assert container.salary_service.get_config(1).base_salary == 26000

    container.salary_service.set_config(SalaryConfig(user_id=1, base_salary=52000))

    assert container.salary_service.get_config(1).base_salary == 52000
    assert container.salary_service.get_salary(1, 3, 2024).base_salary == 52000


def test_set_config_rejects_zero_working_days(container):
    with pytest.raises(ValidationError):
        container.salary_service.set_config(SalaryConfig(user_id=1, base_salary=1000, working_days_per_month=0))
    assert container.salary_service.get_config(1) is None


def test_update_payment_status(container):
    _config(container)
    salary = container.salary_service.generate(1, 3, 2024)

    paid = container.salary_service.update_payment_status(salary.salary_id, PaymentStatus.PAID)
    assert paid.payment_date == date(2024, 3, 15)

    overdue = container.salary_service.update_payment_status(salary.salary_id, PaymentStatus.OVERDUE)
    assert overdue.payment_status == PaymentStatus.OVERDUE
    assert overdue.payment_date is None

    backdated = container.salary_service.update_payment_status(salary.salary_id, PaymentStatus.PENDING, date(2024, 3, 1))
    assert backdated.payment_date == date(2024, 3, 1)

    with pytest.raises(NotFoundError):
        container.salary_service.update_payment_status(404, PaymentStatus.PAID)


def test_initialize_default_configs_skips_existing(container):
    _config(container, user_id=1, base_salary=50000)

    created = container.salary_service.initialize_default_configs([1, 2])

    assert [c.user_id for c in created] == [2]
    default = container.salary_service.get_config(2)
    assert default.base_salary == 30000
    assert sum(a.amount for a in default.allowances) == 8000
    assert (default.total_leaves_allowed, default.working_days_per_month) == (30, 26)
    assert container.salary_service.get_config(1).base_salary == 50000


def test_listings(container):
    _config(container, user_id=1)
    _config(container, user_id=2)
    a = container.salary_service.generate(1, 3, 2024)
    container.salary_service.generate(2, 3, 2024)
    container.salary_service.update_payment_status(a.salary_id, PaymentStatus.PAID)

    assert len(container.salary_service.list_all()) == 2
    assert [s.user_id for s in container.salary_service.list_by_status(PaymentStatus.PAID)] == [1]
    assert [s.user_id for s in container.salary_service.list_for_user(2)] == [2]
