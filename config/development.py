import os

APP_ENV = "development"

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_db"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))

# Attendance rules: HH:MM office start for late detection, unset disables it
WORKDAY_START = os.getenv("WORKDAY_START", "09:00")
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "5"))
HALF_DAY_HOURS = os.getenv("HALF_DAY_HOURS", "4")

CACHE_TTL_SECONDS = float(os.getenv("CACHE_TTL_SECONDS", "300"))
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "5"))
DB_RETRY_TIMEOUT_SECONDS = float(os.getenv("DB_RETRY_TIMEOUT_SECONDS", "30"))
