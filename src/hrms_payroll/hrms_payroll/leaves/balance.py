from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.events import ChangeFeed
from ..core.constants import COLLECTION_LEAVE_BALANCE
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import ValidationError
from .calculations import leaves_used, remaining_leaves
from .model import LeaveBalance
from .policy_service import LeavePolicyService
from .repository import LeaveBalanceRepository, LeaveRequestRepository

logger = logging.getLogger(__name__)


class LeaveBalanceTracker:
    """Per user / leave type / year allowance counters."""

    def __init__(
        self,
        balances: LeaveBalanceRepository,
        policies: LeavePolicyService,
        *,
        requests: LeaveRequestRepository | None = None,
        feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._balances = balances
        self._policies = policies
        self._requests = requests
        self._feed = feed
        self._clock = clock

    def get_balance(self, user_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        return self._balances.get(user_id=int(user_id), leave_type=leave_type, year=int(year))

    def list_for_user(self, user_id: int, year: int | None = None) -> Sequence[LeaveBalance]:
        year = int(year) if year is not None else self._clock().year
        return self._balances.list_for_user(user_id=int(user_id), year=year)

    def total_allowed_days(self, user_id: int, year: int | None = None) -> int:
        return sum(b.total_allowed for b in self.list_for_user(user_id, year))

    def set_balance(self, balance: LeaveBalance) -> LeaveBalance:
        """Full replace; the caller is responsible for keeping ``remaining`` in step."""
        if balance.total_allowed < 0 or balance.used < 0 or balance.carry_forward < 0:
            raise ValidationError("Leave balance counters cannot be negative")
        self._balances.replace(balance)
        self._publish(balance)
        return balance

    def initialize_for_user(self, user_id: int) -> list[LeaveBalance]:
        """Seed one balance per configured policy for the current year.

        Does nothing once the user has any balance for the year. Leave types
        without a policy are skipped.
        """
        year = self._clock().year
        if self._balances.list_for_user(user_id=int(user_id), year=year):
            return []

        created: list[LeaveBalance] = []
        for leave_type in LeaveType:
            policy = self._policies.get_policy(leave_type)
            if not policy:
                continue
            balance = LeaveBalance.fresh(
                user_id=int(user_id),
                leave_type=leave_type,
                year=year,
                total_allowed=policy.allowed_days_per_year,
            )
            if self._balances.create_if_absent(balance):
                created.append(balance)
                self._publish(balance)

        logger.info("Initialized %d leave balances for user %s (%s)", len(created), user_id, year)
        return created

    def record_usage(self, user_id: int, leave_type: LeaveType, year: int, days: int) -> LeaveBalance:
        """Add approved days to the balance, creating it from the policy if missing.

        Uses an atomic increment rather than read-modify-write; when two
        first-time approvals race, the loser of the insert falls back to the
        increment so no days are lost.
        """
        user_id, year, days = int(user_id), int(year), int(days)

        if not self._balances.increment_used(user_id=user_id, leave_type=leave_type, year=year, days=days):
            policy = self._policies.get_policy(leave_type)
            total_allowed = policy.allowed_days_per_year if policy else 0
            created = LeaveBalance.fresh(
                user_id=user_id,
                leave_type=leave_type,
                year=year,
                total_allowed=total_allowed,
            ).with_usage(days)
            if not self._balances.create_if_absent(created):
                self._balances.increment_used(user_id=user_id, leave_type=leave_type, year=year, days=days)

        balance = self._balances.get(user_id=user_id, leave_type=leave_type, year=year)
        if balance:
            self._publish(balance)
        return balance

    def reconcile(self, user_id: int, leave_type: LeaveType, year: int) -> LeaveBalance:
        """Rebuild ``used``/``remaining`` from the approved requests of that year.

        Approvals count toward the year they were approved in, the same year
        ``record_usage`` charges. The allowance and carry-forward of an
        existing balance are kept; a missing balance starts from the policy.
        """
        if self._requests is None:
            raise RuntimeError("LeaveBalanceTracker was built without a leave request repository")
        user_id, year = int(user_id), int(year)

        approved = [
            r
            for r in self._requests.list(user_id=user_id, status=LeaveStatus.APPROVED)
            if r.leave_type == leave_type and (r.approved_date or r.start_date).year == year
        ]
        used = leaves_used(approved)

        current = self._balances.get(user_id=user_id, leave_type=leave_type, year=year)
        if current:
            total_allowed, carry_forward = current.total_allowed, current.carry_forward
        else:
            policy = self._policies.get_policy(leave_type)
            total_allowed, carry_forward = (policy.allowed_days_per_year if policy else 0), 0

        balance = LeaveBalance(
            user_id=user_id,
            leave_type=leave_type,
            year=year,
            total_allowed=total_allowed,
            used=used,
            remaining=remaining_leaves(total_allowed + carry_forward, used),
            carry_forward=carry_forward,
        )
        self._balances.replace(balance)
        self._publish(balance)
        if current and current.used != used:
            logger.warning(
                "Leave balance drift for user %s (%s %s): used %d -> %d",
                user_id,
                leave_type.value,
                year,
                current.used,
                used,
            )
        return balance

    def _publish(self, balance: LeaveBalance) -> None:
        if self._feed:
            self._feed.publish(COLLECTION_LEAVE_BALANCE, balance)
