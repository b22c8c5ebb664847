from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status stored on each daily record."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"
    LATE = "late"


class LeaveStatus(str, Enum):
    """Leave request workflow status.

    CANCELLED is part of the stored model but no workflow transition produces it.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class LeaveType(str, Enum):
    SICK = "sick"
    CASUAL = "casual"
    EARNED = "earned"
    UNPAID = "unpaid"
    MATERNITY = "maternity"
    PATERNITY = "paternity"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class AllowanceType(str, Enum):
    FIXED = "fixed"
    PERCENTAGE = "percentage"


class DeductionReason(str, Enum):
    LEAVE = "leave"
    ABSENT = "absent"
    ADVANCE = "advance"
    TAX = "tax"
    INSURANCE = "insurance"
    OTHER = "other"
