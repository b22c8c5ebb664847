"""Seed current-year leave balances (and optionally salary configs) for users.

Usage: python scripts/initialize_leave_balances.py 1 2 3 [--salary-configs]
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

from src.hrms_payroll.hrms_payroll.container import build_container


def main(argv: list[str]) -> None:
    with_configs = "--salary-configs" in argv
    try:
        user_ids = [int(a) for a in argv if not a.startswith("--")]
    except ValueError:
        raise SystemExit("User ids must be integers")
    if not user_ids:
        raise SystemExit(__doc__)

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper())
    container = build_container(db_config=dict(settings.DB_CONFIG), settings=settings)

    for user_id in user_ids:
        created = container.leave_balance_tracker.initialize_for_user(user_id)
        print(f"user={user_id} leave balances created={len(created)}")

    if with_configs:
        created = container.salary_service.initialize_default_configs(user_ids)
        print(f"OK: Default salary configs created={len(created)}")


if __name__ == "__main__":
    main(sys.argv[1:])
