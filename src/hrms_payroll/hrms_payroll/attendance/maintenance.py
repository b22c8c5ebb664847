from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable

from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def find_duplicate_records(records: Iterable[AttendanceRecord]) -> list[AttendanceRecord]:
    """Return every record except the most recently created one per (user, day)."""
    by_key: dict[tuple[int, object], list[AttendanceRecord]] = {}
    for r in records:
        by_key.setdefault((r.user_id, r.work_date), []).append(r)

    duplicates: list[AttendanceRecord] = []
    for group in by_key.values():
        if len(group) < 2:
            continue
        group.sort(key=lambda r: (r.created_at or datetime.min, r.attendance_id), reverse=True)
        duplicates.extend(group[1:])
    return duplicates


def remove_duplicate_records(attendance: AttendanceRepository, *, dry_run: bool = False) -> list[AttendanceRecord]:
    duplicates = find_duplicate_records(attendance.list_all())
    if not duplicates:
        logger.info("No duplicate attendance records found")
        return []

    logger.info("Found %d duplicate attendance records", len(duplicates))
    if not dry_run:
        deleted = attendance.delete_many([r.attendance_id for r in duplicates])
        logger.info("Deleted %d duplicate attendance records", deleted)
    return duplicates
