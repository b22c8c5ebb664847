from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import Allowance, Deduction, SalaryConfig
from .repository import SalaryConfigRepository

_COLUMNS = "user_id, base_salary, allowances, deductions, total_leaves_allowed, working_days_per_month"


def _to_config(r: dict) -> SalaryConfig:
    return SalaryConfig(
        user_id=int(r["user_id"]),
        base_salary=float(r["base_salary"]),
        allowances=tuple(Allowance.from_dict(a) for a in load_json(r["allowances"])),
        deductions=tuple(Deduction.from_dict(d) for d in load_json(r["deductions"])),
        total_leaves_allowed=int(r["total_leaves_allowed"]),
        working_days_per_month=int(r["working_days_per_month"]),
    )


class MySQLSalaryConfigRepository(SalaryConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, user_id: int) -> Optional[SalaryConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_configs WHERE user_id=%s", (int(user_id),))
            r = fetchone(cur)
            return _to_config(r) if r else None

    def list_all(self) -> Sequence[SalaryConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM salary_configs ORDER BY user_id")
            return [_to_config(r) for r in fetchall(cur)]

    def upsert(self, config: SalaryConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO salary_configs({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    base_salary=VALUES(base_salary),
                    allowances=VALUES(allowances),
                    deductions=VALUES(deductions),
                    total_leaves_allowed=VALUES(total_leaves_allowed),
                    working_days_per_month=VALUES(working_days_per_month)
                """,
                (
                    int(config.user_id),
                    float(config.base_salary),
                    dump_json([a.to_dict() for a in config.allowances]),
                    dump_json([d.to_dict() for d in config.deductions]),
                    int(config.total_leaves_allowed),
                    int(config.working_days_per_month),
                ),
            )
