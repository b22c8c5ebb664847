from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus
from .model import Salary, SalaryConfig


class SalaryRepository(Protocol):
    def get(self, salary_id: int) -> Optional[Salary]:
        raise NotImplementedError

    def get_for_month(self, *, user_id: int, month: int, year: int) -> Optional[Salary]:
        raise NotImplementedError

    def list(self, *, user_id: Optional[int] = None, status: Optional[PaymentStatus] = None) -> Sequence[Salary]:
        raise NotImplementedError

    def create(self, salary: Salary) -> Optional[int]:
        """Insert a new record; None when one already exists for (user, month, year)."""

        raise NotImplementedError

    def replace_amounts(self, salary_id: int, salary: Salary) -> bool:
        """Overwrite base, allowances, deductions and computed totals in place."""

        raise NotImplementedError

    def update_payment(self, *, salary_id: int, status: PaymentStatus, payment_date: Optional[date]) -> bool:
        raise NotImplementedError


class SalaryConfigRepository(Protocol):
    def get(self, user_id: int) -> Optional[SalaryConfig]:
        raise NotImplementedError

    def list_all(self) -> Sequence[SalaryConfig]:
        raise NotImplementedError

    def upsert(self, config: SalaryConfig) -> None:
        raise NotImplementedError
