from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest
from .repository import LeaveRequestRepository

_COLUMNS = """
    request_id, user_id, leave_type, start_date, end_date, reason, status, created_at,
    total_days, approved_by, approved_date, rejection_reason
"""


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        user_id=int(r["user_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        created_at=r.get("created_at"),
        total_days=r.get("total_days"),
        approved_by=r.get("approved_by"),
        approved_date=r.get("approved_date"),
        rejection_reason=r.get("rejection_reason"),
    )


class MySQLLeaveRequestRepository(LeaveRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        user_id: int,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(user_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), leave_type.value, start_date, end_date, reason, LeaveStatus.PENDING.value),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list(self, *, user_id: Optional[int] = None, status: Optional[LeaveStatus] = None) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE {where} ORDER BY created_at DESC",
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def mark_approved(self, *, request_id: int, approved_by: Optional[int], approved_date: datetime, total_days: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s, approved_date=%s, total_days=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    LeaveStatus.APPROVED.value,
                    int(approved_by) if approved_by is not None else None,
                    approved_date,
                    int(total_days),
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def mark_rejected(self, *, request_id: int, rejection_reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, rejection_reason=%s
                WHERE request_id=%s AND status=%s
                """,
                (LeaveStatus.REJECTED.value, rejection_reason, int(request_id), LeaveStatus.PENDING.value),
            )
            return cur.rowcount > 0
