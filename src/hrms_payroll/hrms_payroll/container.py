from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time
from typing import Any, Callable, Optional

from .attendance.aggregator import AttendanceAggregator
from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .common.cache import EntityCache
from .common.datetime_utils import now_local
from .common.events import ChangeFeed
from .core.constants import (
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_RETRY_ATTEMPTS,
    DEFAULT_RETRY_TIMEOUT_SECONDS,
)
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .leaves.balance import LeaveBalanceTracker
from .leaves.mysql_leave_balance_repository import MySQLLeaveBalanceRepository
from .leaves.mysql_leave_policy_repository import MySQLLeavePolicyRepository
from .leaves.mysql_leave_request_repository import MySQLLeaveRequestRepository
from .leaves.policy_service import LeavePolicyService
from .leaves.repository import LeaveBalanceRepository, LeavePolicyRepository, LeaveRequestRepository
from .leaves.service import LeaveService
from .salary.mysql_salary_config_repository import MySQLSalaryConfigRepository
from .salary.mysql_salary_repository import MySQLSalaryRepository
from .salary.repository import SalaryConfigRepository, SalaryRepository
from .salary.service import SalaryService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    attendance_repo: AttendanceRepository
    leave_request_repo: LeaveRequestRepository
    leave_policy_repo: LeavePolicyRepository
    leave_balance_repo: LeaveBalanceRepository
    salary_repo: SalaryRepository
    salary_config_repo: SalaryConfigRepository

    feed: ChangeFeed
    cache: EntityCache

    attendance_service: AttendanceService
    attendance_aggregator: AttendanceAggregator
    leave_policy_service: LeavePolicyService
    leave_balance_tracker: LeaveBalanceTracker
    leave_service: LeaveService
    salary_service: SalaryService

    clock: Callable[[], datetime] = now_local


def _parse_workday_start(value: Optional[str]) -> Optional[time]:
    v = (value or "").strip()
    if not v:
        return None
    try:
        return datetime.strptime(v, "%H:%M").time()
    except ValueError:
        raise ValidationError(f"WORKDAY_START must be HH:MM, got {value!r}")


def strategy_factory_from_settings(settings: Any = None) -> AttendanceStrategyFactory:
    half_day_hours = getattr(settings, "HALF_DAY_HOURS", None)
    return AttendanceStrategyFactory(
        workday_start=_parse_workday_start(getattr(settings, "WORKDAY_START", None)),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", DEFAULT_LATE_GRACE_MINUTES)),
        half_day_hours=float(half_day_hours) if half_day_hours else None,
    )


def wire_container(
    *,
    attendance_repo: AttendanceRepository,
    leave_request_repo: LeaveRequestRepository,
    leave_policy_repo: LeavePolicyRepository,
    leave_balance_repo: LeaveBalanceRepository,
    salary_repo: SalaryRepository,
    salary_config_repo: SalaryConfigRepository,
    conn: Optional[DatabaseConnection] = None,
    settings: Any = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Build every service on top of the given repositories."""
    feed = ChangeFeed()
    cache = EntityCache(ttl_seconds=float(getattr(settings, "CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS)))

    attendance_service = AttendanceService(
        attendance_repo,
        strategy_factory=strategy_factory_from_settings(settings),
        feed=feed,
        clock=clock,
    )
    attendance_aggregator = AttendanceAggregator(attendance_repo)
    leave_policy_service = LeavePolicyService(leave_policy_repo, cache=cache)
    leave_balance_tracker = LeaveBalanceTracker(
        leave_balance_repo, leave_policy_service, requests=leave_request_repo, feed=feed, clock=clock
    )
    salary_service = SalaryService(
        salary_repo,
        salary_config_repo,
        attendance_aggregator,
        cache=cache,
        feed=feed,
        clock=clock,
    )
    leave_service = LeaveService(leave_request_repo, leave_balance_tracker, salary_service, feed=feed, clock=clock)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        leave_request_repo=leave_request_repo,
        leave_policy_repo=leave_policy_repo,
        leave_balance_repo=leave_balance_repo,
        salary_repo=salary_repo,
        salary_config_repo=salary_config_repo,
        feed=feed,
        cache=cache,
        attendance_service=attendance_service,
        attendance_aggregator=attendance_aggregator,
        leave_policy_service=leave_policy_service,
        leave_balance_tracker=leave_balance_tracker,
        leave_service=leave_service,
        salary_service=salary_service,
        clock=clock,
    )


def build_container(*, db_config: dict, settings: Any = None) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
        retry_attempts=int(getattr(settings, "DB_RETRY_ATTEMPTS", DEFAULT_RETRY_ATTEMPTS)),
        retry_timeout=float(getattr(settings, "DB_RETRY_TIMEOUT_SECONDS", DEFAULT_RETRY_TIMEOUT_SECONDS)),
    )
    conn = DatabaseConnection.get_instance(config)

    return wire_container(
        attendance_repo=MySQLAttendanceRepository(conn),
        leave_request_repo=MySQLLeaveRequestRepository(conn),
        leave_policy_repo=MySQLLeavePolicyRepository(conn),
        leave_balance_repo=MySQLLeaveBalanceRepository(conn),
        salary_repo=MySQLSalaryRepository(conn),
        salary_config_repo=MySQLSalaryConfigRepository(conn),
        conn=conn,
        settings=settings,
    )
