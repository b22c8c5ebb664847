from datetime import date, datetime

from src.hrms_payroll.hrms_payroll.attendance.maintenance import find_duplicate_records, remove_duplicate_records
from src.hrms_payroll.hrms_payroll.core.enums import AttendanceStatus
from tests.fakes import FakeAttendanceRepo


def _repo_with_duplicates():
    repo = FakeAttendanceRepo()
    repo.add(1, date(2024, 3, 4), AttendanceStatus.PRESENT, created_at=datetime(2024, 3, 4, 9, 0))
    newest = repo.add(1, date(2024, 3, 4), AttendanceStatus.LATE, created_at=datetime(2024, 3, 4, 9, 30))
    repo.add(1, date(2024, 3, 4), AttendanceStatus.ABSENT, created_at=datetime(2024, 3, 4, 8, 0))
    repo.add(2, date(2024, 3, 4), AttendanceStatus.PRESENT, created_at=datetime(2024, 3, 4, 9, 0))
    return repo, newest


def test_find_keeps_most_recently_created_per_user_and_day():
    repo, newest = _repo_with_duplicates()

    duplicates = find_duplicate_records(repo.list_all())

    assert len(duplicates) == 2
    assert newest.attendance_id not in {d.attendance_id for d in duplicates}


def test_dry_run_deletes_nothing():
    repo, _ = _repo_with_duplicates()
    remove_duplicate_records(repo, dry_run=True)
    assert len(repo.list_all()) == 4


def test_remove_leaves_one_record_per_day():
    repo, newest = _repo_with_duplicates()

    remove_duplicate_records(repo)

    remaining = repo.list_for_user(1)
    assert [r.attendance_id for r in remaining] == [newest.attendance_id]
    assert len(repo.list_for_user(2)) == 1
