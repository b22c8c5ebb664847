from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .attendance.controller import register as register_attendance
from .common.stream import register as register_stream
from .container import Container, build_container
from .database.bootstrap import apply_schema, missing_tables
from .leaves.controller import register as register_leaves
from .salary.controller import register as register_salary

SCHEMA_PATH = Path(__file__).resolve().parents[3] / "database" / "schema.sql"

logger = logging.getLogger(__name__)


def create_app(*, container: Optional[Container] = None) -> Flask:
    """Application factory.

    A prebuilt ``container`` skips database bootstrap entirely (used by tests).
    """
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["APP_ENV"] = getattr(settings, "APP_ENV", "development")

    logging.basicConfig(
        level=str(getattr(settings, "LOG_LEVEL", "INFO")).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )
        if bool(getattr(settings, "AUTO_INIT_DB", False)):
            apply_schema(db_config, schema_path=SCHEMA_PATH)
            missing = missing_tables(db_config)
            if missing:
                logger.warning("Schema applied but tables are missing: %s", ", ".join(missing))
        container = build_container(db_config=db_config, settings=settings)

    app.extensions["hrms_container"] = container

    register_attendance(app, container)
    register_leaves(app, container)
    register_salary(app, container)
    register_stream(app, container)

    return app
