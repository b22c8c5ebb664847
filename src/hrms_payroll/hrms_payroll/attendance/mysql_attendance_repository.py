from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    attendance_id, user_id, work_date, check_in_time, check_out_time, status,
    check_in_location, check_out_location, remarks, created_at
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        user_id=int(r["user_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        check_in_location=r.get("check_in_location"),
        check_out_location=r.get("check_out_location"),
        remarks=r.get("remarks"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_user(self, user_id: int) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records WHERE user_id=%s ORDER BY work_date DESC",
                (int(user_id),),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY work_date DESC, user_id")
            return [_to_record(r) for r in fetchall(cur)]

    def get_for_user_and_date(self, user_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM attendance_records
                WHERE user_id=%s AND work_date=%s
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (int(user_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        user_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: Optional[datetime] = None,
        check_in_location: Optional[str] = None,
        remarks: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(user_id, work_date, check_in_time, status, check_in_location, remarks)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(user_id), work_date, check_in_time, status.value, check_in_location, remarks),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: datetime,
        status: AttendanceStatus,
        check_out_location: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, status=%s, check_out_location=%s
                WHERE attendance_id=%s
                """,
                (check_out_time, status.value, check_out_location, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_status(self, *, attendance_id: int, status: AttendanceStatus, remarks: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance_records SET status=%s, remarks=COALESCE(%s, remarks) WHERE attendance_id=%s",
                (status.value, remarks, int(attendance_id)),
            )
            return cur.rowcount > 0

    def delete_many(self, attendance_ids: Sequence[int]) -> int:
        ids = [int(i) for i in attendance_ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DELETE FROM attendance_records WHERE attendance_id IN ({placeholders})", tuple(ids))
            return int(cur.rowcount)
