"""Remove duplicate attendance records, keeping the newest one per user and day.

Usage: python scripts/dedupe_attendance.py [--dry-run]
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import importlib

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.hrms_payroll.hrms_payroll.attendance.maintenance import remove_duplicate_records
from src.hrms_payroll.hrms_payroll.container import build_container


def main(argv: list[str]) -> None:
    dry_run = "--dry-run" in argv
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)

    duplicates = remove_duplicate_records(container.attendance_repo, dry_run=dry_run)
    for r in duplicates:
        print(f"{'would delete' if dry_run else 'deleted'}: id={r.attendance_id} user={r.user_id} date={r.work_date}")
    print(f"OK: duplicates={len(duplicates)} dry_run={dry_run}")


if __name__ == "__main__":
    main(sys.argv[1:])
