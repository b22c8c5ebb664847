from __future__ import annotations

from datetime import date, datetime, time

import pytest

from src.hrms_payroll.hrms_payroll.attendance.factory import AttendanceStrategyFactory
from src.hrms_payroll.hrms_payroll.attendance.service import AttendanceService
from src.hrms_payroll.hrms_payroll.common.events import ChangeFeed
from src.hrms_payroll.hrms_payroll.core.enums import AttendanceStatus
from src.hrms_payroll.hrms_payroll.core.exceptions import ConflictError, NotFoundError, ValidationError
from tests.fakes import FakeAttendanceRepo, FixedClock


def _service(repo=None, **kwargs):
    clock = FixedClock(datetime(2024, 3, 15, 9, 0))
    return AttendanceService(repo or FakeAttendanceRepo(), clock=clock, **kwargs), clock


def test_check_in_creates_present_record():
    svc, _ = _service()

    record = svc.check_in(5, location="HQ")

    assert record.user_id == 5
    assert record.work_date == date(2024, 3, 15)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_location == "HQ"


def test_second_check_in_same_day_is_conflict():
    repo = FakeAttendanceRepo()
    svc, _ = _service(repo)
    svc.check_in(5)

    with pytest.raises(ConflictError):
        svc.check_in(5)
    assert len(repo.list_for_user(5)) == 1


def test_check_out_without_check_in_is_not_found():
    svc, _ = _service()
    with pytest.raises(NotFoundError):
        svc.check_out(5)


def test_check_out_twice_is_conflict():
    svc, clock = _service()
    svc.check_in(5)
    clock.now = datetime(2024, 3, 15, 18, 0)
    record = svc.check_out(5)

    assert record.check_out_time == datetime(2024, 3, 15, 18, 0)
    with pytest.raises(ConflictError):
        svc.check_out(5)


def test_late_check_in_and_half_day_check_out():
    factory = AttendanceStrategyFactory(workday_start=time(8, 30), grace_minutes=5, half_day_hours=4)
    svc, clock = _service(strategy_factory=factory)

    record = svc.check_in(5)
    assert record.status == AttendanceStatus.LATE

    clock.now = datetime(2024, 3, 15, 11, 0)
    assert svc.check_out(5).status == AttendanceStatus.HALF_DAY


def test_mark_overwrites_or_creates():
    repo = FakeAttendanceRepo()
    svc, _ = _service(repo)
    svc.check_in(5)

    marked = svc.mark(5, work_date=date(2024, 3, 15), status=AttendanceStatus.ABSENT, remarks="sick, no notice")
    created = svc.mark(5, work_date=date(2024, 3, 14), status=AttendanceStatus.PRESENT)

    assert marked.status == AttendanceStatus.ABSENT
    assert created.work_date == date(2024, 3, 14)
    assert len(repo.list_for_user(5)) == 2


def test_mark_future_date_rejected():
    svc, _ = _service()
    with pytest.raises(ValidationError):
        svc.mark(5, work_date=date(2024, 3, 16), status=AttendanceStatus.PRESENT)


def test_writes_are_published_to_feed():
    feed = ChangeFeed()
    seen = []
    feed.subscribe("attendance", lambda name, doc: seen.append(doc.status))
    svc, _ = _service(feed=feed)

    svc.check_in(5)

    assert seen == [AttendanceStatus.PRESENT]
