from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.validators import require_enum, require_int
from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    user_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    created_at: Optional[datetime] = None
    total_days: Optional[int] = None
    approved_by: Optional[int] = None
    approved_date: Optional[datetime] = None
    rejection_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "userId": self.user_id,
            "leaveType": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "totalDays": self.total_days,
            "approvedBy": self.approved_by,
            "approvedDate": self.approved_date.isoformat() if self.approved_date else None,
            "rejectionReason": self.rejection_reason,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class LeavePolicy:
    """Admin-configured rule for one leave type."""

    leave_type: LeaveType
    allowed_days_per_year: int
    carry_forward_days: int = 0
    requires_approval: bool = True

    @classmethod
    def from_dict(cls, data: dict) -> "LeavePolicy":
        return cls(
            leave_type=require_enum(LeaveType, data.get("leaveType"), "Leave type"),
            allowed_days_per_year=require_int(data.get("allowedDaysPerYear"), "allowedDaysPerYear"),
            carry_forward_days=require_int(data.get("carryForwardDays", 0), "carryForwardDays"),
            requires_approval=bool(data.get("requiresApproval", True)),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.leave_type.value,
            "leaveType": self.leave_type.value,
            "allowedDaysPerYear": self.allowed_days_per_year,
            "carryForwardDays": self.carry_forward_days,
            "requiresApproval": self.requires_approval,
        }


@dataclass(frozen=True)
class LeaveBalance:
    """Per user, leave type and year counters.

    Expected to satisfy ``remaining == total_allowed + carry_forward - used``;
    whoever writes a full balance keeps that in step.
    """

    user_id: int
    leave_type: LeaveType
    year: int
    total_allowed: int
    used: int
    remaining: int
    carry_forward: int = 0

    @classmethod
    def fresh(cls, *, user_id: int, leave_type: LeaveType, year: int, total_allowed: int) -> "LeaveBalance":
        return cls(
            user_id=int(user_id),
            leave_type=leave_type,
            year=int(year),
            total_allowed=int(total_allowed),
            used=0,
            remaining=int(total_allowed),
            carry_forward=0,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "LeaveBalance":
        total_allowed = require_int(data.get("totalAllowed"), "totalAllowed")
        used = require_int(data.get("used", 0), "used")
        carry_forward = require_int(data.get("carryForward", 0), "carryForward")
        remaining = data.get("remaining")
        return cls(
            user_id=require_int(data.get("userId"), "userId"),
            leave_type=require_enum(LeaveType, data.get("leaveType"), "Leave type"),
            year=require_int(data.get("year"), "year"),
            total_allowed=total_allowed,
            used=used,
            remaining=require_int(remaining, "remaining") if remaining is not None else total_allowed + carry_forward - used,
            carry_forward=carry_forward,
        )

    def with_usage(self, days: int) -> "LeaveBalance":
        return replace(self, used=self.used + int(days), remaining=self.remaining - int(days))

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "leaveType": self.leave_type.value,
            "year": self.year,
            "totalAllowed": self.total_allowed,
            "used": self.used,
            "remaining": self.remaining,
            "carryForward": self.carry_forward,
        }
