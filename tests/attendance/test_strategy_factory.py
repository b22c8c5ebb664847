from datetime import datetime, time

from src.hrms_payroll.hrms_payroll.attendance.factory import AttendanceStrategyFactory
from src.hrms_payroll.hrms_payroll.attendance.strategies.half_day_strategy import HalfDayStrategy
from src.hrms_payroll.hrms_payroll.attendance.strategies.late_strategy import LateStrategy
from src.hrms_payroll.hrms_payroll.attendance.strategies.present_strategy import PresentStrategy
from src.hrms_payroll.hrms_payroll.core.enums import AttendanceStatus


def test_factory_checkin_on_time_within_grace():
    factory = AttendanceStrategyFactory(workday_start=time(9, 0), grace_minutes=5)
    strategy = factory.for_checkin(now=datetime(2025, 1, 1, 9, 4, 59))

    assert isinstance(strategy, PresentStrategy)


def test_factory_checkin_late_after_grace():
    factory = AttendanceStrategyFactory(workday_start=time(9, 0), grace_minutes=5)
    now = datetime(2025, 1, 1, 9, 20)
    strategy = factory.for_checkin(now=now)

    assert isinstance(strategy, LateStrategy)
    decision = strategy.decide_checkin(now=now)
    assert decision.status == AttendanceStatus.LATE
    assert decision.remarks == "Late by 20 min"


def test_factory_without_workday_start_is_always_present():
    strategy = AttendanceStrategyFactory().for_checkin(now=datetime(2025, 1, 1, 23, 0))
    assert isinstance(strategy, PresentStrategy)


def test_short_day_is_downgraded_to_half_day():
    factory = AttendanceStrategyFactory(half_day_hours=4)
    check_in = datetime(2025, 1, 1, 9, 0)
    now = datetime(2025, 1, 1, 12, 30)

    strategy = factory.for_checkout(now=now, check_in_time=check_in, current_status=AttendanceStatus.PRESENT)

    assert isinstance(strategy, HalfDayStrategy)
    decision = strategy.decide_checkout(now=now, check_in_time=check_in, current=AttendanceStatus.PRESENT)
    assert decision.status == AttendanceStatus.HALF_DAY
    assert decision.remarks == "Half day (03:30 worked)"


def test_full_day_keeps_current_status():
    factory = AttendanceStrategyFactory(half_day_hours=4)
    check_in = datetime(2025, 1, 1, 9, 30)
    now = datetime(2025, 1, 1, 18, 0)

    strategy = factory.for_checkout(now=now, check_in_time=check_in, current_status=AttendanceStatus.LATE)
    decision = strategy.decide_checkout(now=now, check_in_time=check_in, current=AttendanceStatus.LATE)

    assert decision.status == AttendanceStatus.LATE


def test_marked_absent_day_is_not_touched_on_checkout():
    factory = AttendanceStrategyFactory(half_day_hours=4)
    strategy = factory.for_checkout(
        now=datetime(2025, 1, 1, 10, 0),
        check_in_time=datetime(2025, 1, 1, 9, 0),
        current_status=AttendanceStatus.ABSENT,
    )
    assert isinstance(strategy, PresentStrategy)
