from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeavePolicy
from .repository import LeavePolicyRepository


def _to_policy(r: dict) -> LeavePolicy:
    return LeavePolicy(
        leave_type=LeaveType(r["leave_type"]),
        allowed_days_per_year=int(r["allowed_days_per_year"]),
        carry_forward_days=int(r["carry_forward_days"]),
        requires_approval=bool(r["requires_approval"]),
    )


class MySQLLeavePolicyRepository(LeavePolicyRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[LeavePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type, allowed_days_per_year, carry_forward_days, requires_approval
                FROM leave_policies
                ORDER BY leave_type
                """
            )
            return [_to_policy(r) for r in fetchall(cur)]

    def get(self, leave_type: LeaveType) -> Optional[LeavePolicy]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT leave_type, allowed_days_per_year, carry_forward_days, requires_approval
                FROM leave_policies
                WHERE leave_type=%s
                """,
                (leave_type.value,),
            )
            r = fetchone(cur)
            return _to_policy(r) if r else None

    def upsert(self, policy: LeavePolicy) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_policies(leave_type, allowed_days_per_year, carry_forward_days, requires_approval)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    allowed_days_per_year=VALUES(allowed_days_per_year),
                    carry_forward_days=VALUES(carry_forward_days),
                    requires_approval=VALUES(requires_approval)
                """,
                (
                    policy.leave_type.value,
                    int(policy.allowed_days_per_year),
                    int(policy.carry_forward_days),
                    1 if policy.requires_approval else 0,
                ),
            )
