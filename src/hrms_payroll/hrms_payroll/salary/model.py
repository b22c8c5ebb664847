from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_enum, require_int, require_non_empty, require_non_negative
from ..core.constants import DEFAULT_TOTAL_LEAVES_ALLOWED, DEFAULT_WORKING_DAYS_PER_MONTH
from ..core.enums import AllowanceType, DeductionReason, PaymentStatus


@dataclass(frozen=True)
class Allowance:
    allowance_id: str
    name: str
    amount: float
    type: AllowanceType = AllowanceType.FIXED

    @classmethod
    def from_dict(cls, data: dict) -> "Allowance":
        return cls(
            allowance_id=str(data.get("id") or ""),
            name=require_non_empty(data.get("name", ""), "Allowance name"),
            amount=require_non_negative(data.get("amount", 0), "Allowance amount"),
            type=require_enum(AllowanceType, data.get("type", AllowanceType.FIXED.value), "Allowance type"),
        )

    def to_dict(self) -> dict:
        return {"id": self.allowance_id, "name": self.name, "amount": self.amount, "type": self.type.value}


@dataclass(frozen=True)
class Deduction:
    deduction_id: str
    name: str
    amount: float
    reason: Optional[DeductionReason] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Deduction":
        reason = data.get("reason")
        return cls(
            deduction_id=str(data.get("id") or ""),
            name=require_non_empty(data.get("name", ""), "Deduction name"),
            amount=require_non_negative(data.get("amount", 0), "Deduction amount"),
            reason=require_enum(DeductionReason, reason, "Deduction reason") if reason else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.deduction_id,
            "name": self.name,
            "amount": self.amount,
            "reason": self.reason.value if self.reason else None,
        }


@dataclass(frozen=True)
class SalaryConfig:
    """Per-employee template used to generate monthly salary records."""

    user_id: int
    base_salary: float
    allowances: tuple[Allowance, ...] = ()
    deductions: tuple[Deduction, ...] = ()
    total_leaves_allowed: int = DEFAULT_TOTAL_LEAVES_ALLOWED
    working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH

    @classmethod
    def from_dict(cls, data: dict) -> "SalaryConfig":
        return cls(
            user_id=require_int(data.get("userId"), "userId"),
            base_salary=require_non_negative(data.get("baseSalary"), "Base salary"),
            allowances=tuple(Allowance.from_dict(a) for a in data.get("allowances") or []),
            deductions=tuple(Deduction.from_dict(d) for d in data.get("deductions") or []),
            total_leaves_allowed=require_int(data.get("totalLeavesAllowed", DEFAULT_TOTAL_LEAVES_ALLOWED), "totalLeavesAllowed"),
            working_days_per_month=require_int(data.get("workingDaysPerMonth", DEFAULT_WORKING_DAYS_PER_MONTH), "workingDaysPerMonth"),
        )

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "baseSalary": self.base_salary,
            "allowances": [a.to_dict() for a in self.allowances],
            "deductions": [d.to_dict() for d in self.deductions],
            "totalLeavesAllowed": self.total_leaves_allowed,
            "workingDaysPerMonth": self.working_days_per_month,
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    per_day_salary: float
    total_allowances: float
    total_deductions: float
    net_salary: float


@dataclass(frozen=True)
class Salary:
    salary_id: int
    user_id: int
    month: int
    year: int
    base_salary: float
    allowances: tuple[Allowance, ...]
    deductions: tuple[Deduction, ...]
    per_day_salary: float
    total_allowances: float
    total_deductions: float
    net_salary: float
    payment_status: PaymentStatus = PaymentStatus.PENDING
    payment_date: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    def to_dict(self) -> dict:
        return {
            "id": self.salary_id,
            "userId": self.user_id,
            "month": self.month,
            "year": self.year,
            "baseSalary": self.base_salary,
            "allowances": [a.to_dict() for a in self.allowances],
            "deductions": [d.to_dict() for d in self.deductions],
            "perDaySalary": self.per_day_salary,
            "totalAllowances": self.total_allowances,
            "totalDeductions": self.total_deductions,
            "netSalary": self.net_salary,
            "paymentStatus": self.payment_status.value,
            "paymentDate": self.payment_date.isoformat() if self.payment_date else None,
        }
