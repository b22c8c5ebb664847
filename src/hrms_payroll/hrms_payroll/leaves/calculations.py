from __future__ import annotations

import math
from typing import Iterable

from ..common.datetime_utils import DateLike
from ..core.enums import LeaveStatus
from .model import LeaveRequest

SECONDS_PER_DAY = 24 * 60 * 60


def days_requested(start: DateLike, end: DateLike) -> int:
    """Inclusive day count: 2024-03-01..2024-03-03 is 3 days."""
    delta = end - start
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY) + 1


def leaves_used(requests: Iterable[LeaveRequest]) -> int:
    return sum(days_requested(r.start_date, r.end_date) for r in requests if r.status == LeaveStatus.APPROVED)


def remaining_leaves(allowed_days: int, used_days: int) -> int:
    return max(0, allowed_days - used_days)


def has_leave_balance(leave_days: int, remaining_balance: int) -> bool:
    return leave_days <= remaining_balance
