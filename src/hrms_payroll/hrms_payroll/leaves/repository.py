from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveBalance, LeavePolicy, LeaveRequest


class LeaveRequestRepository(Protocol):
    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def mark_approved(self, *, request_id: int, approved_by: Optional[int], approved_date: datetime, total_days: int) -> bool:
        """Only succeeds while the request is still pending."""

        raise NotImplementedError

    def mark_rejected(self, *, request_id: int, rejection_reason: str) -> bool:
        """Only succeeds while the request is still pending."""

        raise NotImplementedError


class LeavePolicyRepository(Protocol):
    def list_all(self) -> Sequence[LeavePolicy]:
        raise NotImplementedError

    def get(self, leave_type: LeaveType) -> Optional[LeavePolicy]:
        raise NotImplementedError

    def upsert(self, policy: LeavePolicy) -> None:
        raise NotImplementedError


class LeaveBalanceRepository(Protocol):
    def get(self, *, user_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        raise NotImplementedError

    def list_for_user(self, *, user_id: int, year: int) -> Sequence[LeaveBalance]:
        raise NotImplementedError

    def replace(self, balance: LeaveBalance) -> None:
        """Full overwrite of the (user, leave type, year) row."""

        raise NotImplementedError

    def create_if_absent(self, balance: LeaveBalance) -> bool:
        """Insert unless a row already exists for the key; True when inserted."""

        raise NotImplementedError

    def increment_used(self, *, user_id: int, leave_type: LeaveType, year: int, days: int) -> bool:
        """Atomic ``used += days, remaining -= days``; False when no row exists."""

        raise NotImplementedError
