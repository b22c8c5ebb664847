from __future__ import annotations

from typing import Optional, Sequence

from ...common.datetime_utils import days_in_month
from ...core.constants import (
    ABSENT_DEDUCTION_ID,
    ABSENT_DEDUCTION_NAME,
    DEFAULT_WORKING_DAYS_PER_MONTH,
    MIN_WORKING_DAYS_PER_MONTH,
)
from ...core.enums import DeductionReason
from ...core.exceptions import ValidationError
from ..model import Allowance, Deduction, SalaryBreakdown
from .base import SalaryCalculator


def per_day_salary(base_salary: float, working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH) -> float:
    if int(working_days_per_month) < MIN_WORKING_DAYS_PER_MONTH:
        raise ValidationError(f"Working days per month must be at least {MIN_WORKING_DAYS_PER_MONTH}")
    return base_salary / working_days_per_month


def total_allowances(allowances: Sequence[Allowance]) -> float:
    # Percentage allowances are summed as flat amounts, same as fixed ones.
    return sum((a.amount for a in allowances), 0.0)


def total_deductions(deductions: Sequence[Deduction]) -> float:
    return sum((d.amount for d in deductions), 0.0)


def net_salary(base_salary: float, allowances_total: float, deductions_total: float) -> float:
    return base_salary + allowances_total - deductions_total


def working_days_in_month(month: int, year: int) -> int:
    """Working days assumed for absence purposes: 26, capped by the calendar."""
    return min(DEFAULT_WORKING_DAYS_PER_MONTH, days_in_month(month, year))


class StandardSalaryCalculator(SalaryCalculator):
    """Standard rule: net = base + allowances - deductions; absence at the per-day rate."""

    def calculate(
        self,
        base_salary: float,
        allowances: Sequence[Allowance],
        deductions: Sequence[Deduction],
        working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH,
    ) -> SalaryBreakdown:
        per_day = per_day_salary(base_salary, working_days_per_month)
        allowances_total = total_allowances(allowances)
        deductions_total = total_deductions(deductions)
        return SalaryBreakdown(
            per_day_salary=per_day,
            total_allowances=allowances_total,
            total_deductions=deductions_total,
            net_salary=net_salary(base_salary, allowances_total, deductions_total),
        )

    def absence_deduction(self, *, per_day_salary: float, present_days: int, month: int, year: int) -> Optional[Deduction]:
        absent_days = max(0, working_days_in_month(month, year) - int(present_days))
        if absent_days == 0:
            return None
        return Deduction(
            deduction_id=ABSENT_DEDUCTION_ID,
            name=ABSENT_DEDUCTION_NAME,
            amount=absent_days * per_day_salary,
            reason=DeductionReason.ABSENT,
        )
