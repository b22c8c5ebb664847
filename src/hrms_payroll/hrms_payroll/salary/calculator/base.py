from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ...core.constants import DEFAULT_WORKING_DAYS_PER_MONTH
from ..model import Allowance, Deduction, SalaryBreakdown


class SalaryCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(
        self,
        base_salary: float,
        allowances: Sequence[Allowance],
        deductions: Sequence[Deduction],
        working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH,
    ) -> SalaryBreakdown:
        raise NotImplementedError

    @abstractmethod
    def absence_deduction(self, *, per_day_salary: float, present_days: int, month: int, year: int) -> Optional[Deduction]:
        """Deduction for the working days without a ``present`` record, or None."""

        raise NotImplementedError
