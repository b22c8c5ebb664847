from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveBalance
from .repository import LeaveBalanceRepository

_COLUMNS = "user_id, leave_type, year, total_allowed, used, remaining, carry_forward"


def _to_balance(r: dict) -> LeaveBalance:
    return LeaveBalance(
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        year=int(r["year"]),
        total_allowed=int(r["total_allowed"]),
        used=int(r["used"]),
        remaining=int(r["remaining"]),
        carry_forward=int(r["carry_forward"]),
    )


def _row(balance: LeaveBalance) -> tuple:
    return (
        int(balance.user_id),
        balance.leave_type.value,
        int(balance.year),
        int(balance.total_allowed),
        int(balance.used),
        int(balance.remaining),
        int(balance.carry_forward),
    )


class MySQLLeaveBalanceRepository(LeaveBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, leave_type: LeaveType, year: int) -> Optional[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_balances WHERE user_id=%s AND leave_type=%s AND year=%s",
                (int(user_id), leave_type.value, int(year)),
            )
            r = fetchone(cur)
            return _to_balance(r) if r else None

    def list_for_user(self, *, user_id: int, year: int) -> Sequence[LeaveBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_balances WHERE user_id=%s AND year=%s ORDER BY leave_type",
                (int(user_id), int(year)),
            )
            return [_to_balance(r) for r in fetchall(cur)]

    def replace(self, balance: LeaveBalance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"REPLACE INTO leave_balances({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s)",
                _row(balance),
            )

    def create_if_absent(self, balance: LeaveBalance) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT IGNORE INTO leave_balances({_COLUMNS}) VALUES(%s,%s,%s,%s,%s,%s,%s)",
                _row(balance),
            )
            return cur.rowcount > 0

    def increment_used(self, *, user_id: int, leave_type: LeaveType, year: int, days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_balances
                SET used = used + %s, remaining = remaining - %s
                WHERE user_id=%s AND leave_type=%s AND year=%s
                """,
                (int(days), int(days), int(user_id), leave_type.value, int(year)),
            )
            return cur.rowcount > 0
