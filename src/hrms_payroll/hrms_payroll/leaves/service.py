from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import months_spanned, now_local
from ..common.events import ChangeFeed
from ..common.post_commit import PostCommitTasks, TaskOutcome
from ..common.validators import require_non_empty
from ..core.constants import COLLECTION_LEAVES
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..salary.service import SalaryService
from .balance import LeaveBalanceTracker
from .calculations import days_requested, has_leave_balance
from .model import LeaveRequest
from .repository import LeaveRequestRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApprovalResult:
    request: LeaveRequest
    days_requested: int
    side_effects: list[TaskOutcome]


class LeaveService:
    """Leave requests: pending -> approved | rejected.

    Approval stores the new status first; the balance update and the salary
    recalculation of each spanned month then run as independent post-commit
    tasks, so a failure there is logged and never undoes the approval.
    """

    def __init__(
        self,
        requests: LeaveRequestRepository,
        balances: LeaveBalanceTracker,
        salaries: SalaryService,
        *,
        feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._requests = requests
        self._balances = balances
        self._salaries = salaries
        self._feed = feed
        self._clock = clock

    def apply(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        reason = require_non_empty(reason, "Reason")
        if end_date < start_date:
            raise ValidationError("End date must be on or after the start date")

        days = days_requested(start_date, end_date)
        balance = self._balances.get_balance(int(user_id), leave_type, self._clock().year)
        if balance and not has_leave_balance(days, balance.remaining):
            raise ConflictError(
                f"Insufficient {leave_type.value} leave balance: {days} day(s) requested, {balance.remaining} remaining"
            )

        request_id = self._requests.create(
            user_id=int(user_id),
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
        )
        logger.info("Leave request %s submitted by user %s (%s, %d days)", request_id, user_id, leave_type.value, days)
        return self._reload_and_publish(request_id)

    def approve(self, request_id: int, approver_id: Optional[int] = None) -> ApprovalResult:
        req = self._pending_request(request_id)
        days = days_requested(req.start_date, req.end_date)
        now = self._clock()

        ok = self._requests.mark_approved(
            request_id=req.request_id,
            approved_by=int(approver_id) if approver_id is not None else None,
            approved_date=now,
            total_days=days,
        )
        if not ok:
            raise ConflictError("Leave request has already been processed")
        approved = self._reload_and_publish(req.request_id)
        logger.info("Leave request %s approved by %s (%d days)", req.request_id, approver_id, days)

        tasks = PostCommitTasks()
        tasks.add("leave-balance", self._balances.record_usage, req.user_id, req.leave_type, now.year, days)
        for month, year in months_spanned(req.start_date, req.end_date):
            tasks.add(
                f"recalculate-salary:{year}-{month:02d}",
                self._salaries.recalculate_if_configured,
                req.user_id,
                month,
                year,
            )
        return ApprovalResult(request=approved, days_requested=days, side_effects=tasks.run())

    def reject(self, request_id: int, reason: str) -> LeaveRequest:
        reason = require_non_empty(reason, "Rejection reason")
        req = self._pending_request(request_id)

        if not self._requests.mark_rejected(request_id=req.request_id, rejection_reason=reason):
            raise ConflictError("Leave request has already been processed")
        logger.info("Leave request %s rejected", req.request_id)
        return self._reload_and_publish(req.request_id)

    def get(self, request_id: int) -> LeaveRequest:
        req = self._requests.get(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found")
        return req

    def list_for_user(self, user_id: int) -> Sequence[LeaveRequest]:
        return self._requests.list(user_id=int(user_id))

    def list_pending(self) -> Sequence[LeaveRequest]:
        return self._requests.list(status=LeaveStatus.PENDING)

    def list_all(self, *, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        return self._requests.list(status=status)

    def _pending_request(self, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if req.status != LeaveStatus.PENDING:
            raise ConflictError(f"Leave request is already {req.status.value}")
        return req

    def _reload_and_publish(self, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if self._feed:
            self._feed.publish(COLLECTION_LEAVES, req)
        return req
