from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..attendance.aggregator import AttendanceAggregator
from ..common.cache import EntityCache
from ..common.datetime_utils import now_local, require_month
from ..common.events import ChangeFeed
from ..common.post_commit import PostCommitTasks, TaskOutcome
from ..core.constants import (
    ABSENT_DEDUCTION_ID,
    COLLECTION_SALARY,
    COLLECTION_SALARY_CONFIG,
    DEFAULT_BASE_SALARY,
    DEFAULT_CONVEYANCE_ALLOWANCE,
    DEFAULT_MEDICAL_ALLOWANCE,
    DEFAULT_TOTAL_LEAVES_ALLOWED,
    DEFAULT_WORKING_DAYS_PER_MONTH,
    MIN_WORKING_DAYS_PER_MONTH,
)
from ..core.enums import AllowanceType, PaymentStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .calculator.base import SalaryCalculator
from .calculator.standard_calculator import StandardSalaryCalculator
from .model import Allowance, Deduction, Salary, SalaryConfig
from .repository import SalaryConfigRepository, SalaryRepository

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "salary_config"


@dataclass(frozen=True)
class ConfigUpdate:
    config: SalaryConfig
    side_effects: list[TaskOutcome]


def default_salary_config(user_id: int) -> SalaryConfig:
    return SalaryConfig(
        user_id=int(user_id),
        base_salary=DEFAULT_BASE_SALARY,
        allowances=(
            Allowance(f"conveyance-{user_id}", "Conveyance Allowance", DEFAULT_CONVEYANCE_ALLOWANCE, AllowanceType.FIXED),
            Allowance(f"medical-{user_id}", "Medical Allowance", DEFAULT_MEDICAL_ALLOWANCE, AllowanceType.FIXED),
        ),
        total_leaves_allowed=DEFAULT_TOTAL_LEAVES_ALLOWED,
        working_days_per_month=DEFAULT_WORKING_DAYS_PER_MONTH,
    )


class SalaryService:
    """Salary lifecycle: generation, recalculation and payment status.

    ``generate`` is the deliberate monthly payroll run and refuses to touch an
    existing record; ``recalculate`` is what the system calls when inputs
    change and always overwrites.
    """

    def __init__(
        self,
        salaries: SalaryRepository,
        configs: SalaryConfigRepository,
        aggregator: AttendanceAggregator,
        *,
        calculator: Optional[SalaryCalculator] = None,
        cache: EntityCache | None = None,
        feed: ChangeFeed | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._salaries = salaries
        self._configs = configs
        self._aggregator = aggregator
        self._calculator = calculator or StandardSalaryCalculator()
        self._cache = cache or EntityCache()
        self._feed = feed
        self._clock = clock

    # -------- Configuration --------
    def get_config(self, user_id: int) -> Optional[SalaryConfig]:
        return self._cache.get_or_load(CACHE_NAMESPACE, int(user_id), lambda: self._configs.get(int(user_id)))

    def list_configs(self) -> Sequence[SalaryConfig]:
        return self._configs.list_all()

    def set_config(self, config: SalaryConfig) -> ConfigUpdate:
        if config.working_days_per_month < MIN_WORKING_DAYS_PER_MONTH:
            raise ValidationError(f"Working days per month must be at least {MIN_WORKING_DAYS_PER_MONTH}")

        self._configs.upsert(config)
        self._cache.invalidate(CACHE_NAMESPACE, config.user_id)
        if self._feed:
            self._feed.publish(COLLECTION_SALARY_CONFIG, config)

        today = self._clock()
        tasks = PostCommitTasks()
        tasks.add(f"recalculate-salary:{today.year}-{today.month:02d}", self.recalculate, config.user_id, today.month, today.year, config)
        return ConfigUpdate(config=config, side_effects=tasks.run())

    def initialize_default_configs(self, user_ids: Sequence[int]) -> list[SalaryConfig]:
        created: list[SalaryConfig] = []
        for user_id in user_ids:
            if self.get_config(int(user_id)):
                logger.info("Salary config already exists for user %s", user_id)
                continue
            config = default_salary_config(int(user_id))
            self._configs.upsert(config)
            self._cache.invalidate(CACHE_NAMESPACE, config.user_id)
            created.append(config)
        logger.info("Created %d default salary configs", len(created))
        return created

    # -------- Lifecycle --------
    def generate(
        self,
        user_id: int,
        month: int,
        year: int,
        *,
        base_salary: Optional[float] = None,
        allowances: Optional[Sequence[Allowance]] = None,
        deductions: Optional[Sequence[Deduction]] = None,
    ) -> Salary:
        month = require_month(month)
        if self._salaries.get_for_month(user_id=int(user_id), month=month, year=int(year)):
            raise ConflictError(f"Salary for {year}-{month:02d} has already been generated")

        config = self.get_config(int(user_id))
        if base_salary is None and config is None:
            raise NotFoundError("Salary configuration not found for this employee")

        draft = self._build(
            int(user_id),
            month,
            int(year),
            base_salary=base_salary if base_salary is not None else config.base_salary,
            allowances=allowances if allowances is not None else (config.allowances if config else ()),
            deductions=deductions if deductions is not None else (config.deductions if config else ()),
            working_days=config.working_days_per_month if config else DEFAULT_WORKING_DAYS_PER_MONTH,
        )
        salary_id = self._salaries.create(draft)
        if salary_id is None:
            raise ConflictError(f"Salary for {year}-{month:02d} has already been generated")

        logger.info("Generated salary for user %s (%s-%02d)", user_id, year, month)
        return self._reload_and_publish(salary_id)

    def recalculate(self, user_id: int, month: int, year: int, config: SalaryConfig) -> Salary:
        month = require_month(month)
        draft = self._build(
            int(user_id),
            month,
            int(year),
            base_salary=config.base_salary,
            allowances=config.allowances,
            deductions=config.deductions,
            working_days=config.working_days_per_month,
        )

        existing = self._salaries.get_for_month(user_id=int(user_id), month=month, year=int(year))
        if existing is None:
            salary_id = self._salaries.create(draft)
            if salary_id is not None:
                logger.info("Created salary for user %s (%s-%02d) on recalculation", user_id, year, month)
                return self._reload_and_publish(salary_id)
            # Created concurrently; overwrite that one instead.
            existing = self._salaries.get_for_month(user_id=int(user_id), month=month, year=int(year))
            if existing is None:
                raise NotFoundError("Salary record disappeared during recalculation")

        self._salaries.replace_amounts(existing.salary_id, draft)
        logger.info("Recalculated salary for user %s (%s-%02d)", user_id, year, month)
        return self._reload_and_publish(existing.salary_id)

    def recalculate_if_configured(self, user_id: int, month: int, year: int) -> Optional[Salary]:
        config = self.get_config(int(user_id))
        if config is None:
            return None
        return self.recalculate(int(user_id), month, year, config)

    def update_payment_status(self, salary_id: int, status: PaymentStatus, payment_date: Optional[date] = None) -> Salary:
        salary = self._salaries.get(int(salary_id))
        if not salary:
            raise NotFoundError("Salary record not found")

        # Only a paid record carries a payment date unless one is given explicitly.
        if status == PaymentStatus.PAID and payment_date is None:
            payment_date = self._clock().date()

        self._salaries.update_payment(salary_id=int(salary_id), status=status, payment_date=payment_date)
        return self._reload_and_publish(int(salary_id))

    # -------- Queries --------
    def get_salary(self, user_id: int, month: int, year: int) -> Optional[Salary]:
        return self._salaries.get_for_month(user_id=int(user_id), month=require_month(month), year=int(year))

    def list_for_user(self, user_id: int) -> Sequence[Salary]:
        return self._salaries.list(user_id=int(user_id))

    def list_by_status(self, status: PaymentStatus) -> Sequence[Salary]:
        return self._salaries.list(status=status)

    def list_all(self) -> Sequence[Salary]:
        return self._salaries.list()

    # -------- Internals --------
    def _build(
        self,
        user_id: int,
        month: int,
        year: int,
        *,
        base_salary: float,
        allowances: Sequence[Allowance],
        deductions: Sequence[Deduction],
        working_days: int,
    ) -> Salary:
        manual = tuple(d for d in deductions if d.deduction_id != ABSENT_DEDUCTION_ID)
        per_day = self._calculator.calculate(base_salary, allowances, manual, working_days).per_day_salary

        attendance = self._aggregator.monthly(user_id, month, year)
        absent = self._calculator.absence_deduction(
            per_day_salary=per_day,
            present_days=attendance.present_days,
            month=month,
            year=year,
        )
        all_deductions = manual + ((absent,) if absent else ())
        breakdown = self._calculator.calculate(base_salary, allowances, all_deductions, working_days)

        return Salary(
            salary_id=0,
            user_id=user_id,
            month=month,
            year=year,
            base_salary=float(base_salary),
            allowances=tuple(allowances),
            deductions=all_deductions,
            per_day_salary=breakdown.per_day_salary,
            total_allowances=breakdown.total_allowances,
            total_deductions=breakdown.total_deductions,
            net_salary=breakdown.net_salary,
            payment_status=PaymentStatus.PENDING,
        )

    def _reload_and_publish(self, salary_id: int) -> Salary:
        salary = self._salaries.get(int(salary_id))
        if not salary:
            raise NotFoundError("Salary record not found after write")
        if self._feed:
            self._feed.publish(COLLECTION_SALARY, salary)
        return salary
