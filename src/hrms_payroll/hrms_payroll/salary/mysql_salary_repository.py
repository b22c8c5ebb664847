from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import PaymentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, is_duplicate_key, load_json
from .model import Allowance, Deduction, Salary
from .repository import SalaryRepository

_COLUMNS = """
    salary_id, user_id, month, year, base_salary, allowances, deductions,
    per_day_salary, total_allowances, total_deductions, net_salary,
    payment_status, payment_date, created_at, updated_at
"""


def _to_salary(r: dict) -> Salary:
    return Salary(
        salary_id=int(r["salary_id"]),
        user_id=int(r["user_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        base_salary=float(r["base_salary"]),
        allowances=tuple(Allowance.from_dict(a) for a in load_json(r["allowances"])),
        deductions=tuple(Deduction.from_dict(d) for d in load_json(r["deductions"])),
        per_day_salary=float(r["per_day_salary"]),
        total_allowances=float(r["total_allowances"]),
        total_deductions=float(r["total_deductions"]),
        net_salary=float(r["net_salary"]),
        payment_status=PaymentStatus(r["payment_status"]),
        payment_date=r.get("payment_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


def _amounts(salary: Salary) -> tuple:
    return (
        float(salary.base_salary),
        dump_json([a.to_dict() for a in salary.allowances]),
        dump_json([d.to_dict() for d in salary.deductions]),
        float(salary.per_day_salary),
        float(salary.total_allowances),
        float(salary.total_deductions),
        float(salary.net_salary),
    )


class MySQLSalaryRepository(SalaryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, salary_id: int) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salaries WHERE salary_id=%s", (int(salary_id),))
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def get_for_month(self, *, user_id: int, month: int, year: int) -> Optional[Salary]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE user_id=%s AND month=%s AND year=%s",
                (int(user_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_salary(r) if r else None

    def list(self, *, user_id: Optional[int] = None, status: Optional[PaymentStatus] = None) -> Sequence[Salary]:
        clauses = ["1=1"]
        params: list[object] = []

        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("payment_status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM salaries WHERE {where} ORDER BY year DESC, month DESC, user_id",
                tuple(params),
            )
            return [_to_salary(r) for r in fetchall(cur)]

    def create(self, salary: Salary) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO salaries(
                        user_id, month, year, base_salary, allowances, deductions,
                        per_day_salary, total_allowances, total_deductions, net_salary,
                        payment_status, payment_date
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(salary.user_id), int(salary.month), int(salary.year))
                    + _amounts(salary)
                    + (salary.payment_status.value, salary.payment_date),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                return None
            raise

    def replace_amounts(self, salary_id: int, salary: Salary) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE salaries
                SET base_salary=%s, allowances=%s, deductions=%s,
                    per_day_salary=%s, total_allowances=%s, total_deductions=%s, net_salary=%s
                WHERE salary_id=%s
                """,
                _amounts(salary) + (int(salary_id),),
            )
            return cur.rowcount > 0

    def update_payment(self, *, salary_id: int, status: PaymentStatus, payment_date: Optional[date]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE salaries SET payment_status=%s, payment_date=%s WHERE salary_id=%s",
                (status.value, payment_date, int(salary_id)),
            )
            return cur.rowcount > 0
