import os

APP_ENV = "testing"

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "hrms_test_db"),
}

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

AUTO_INIT_DB = False

WORKDAY_START = None
LATE_GRACE_MINUTES = 5
HALF_DAY_HOURS = None

CACHE_TTL_SECONDS = 0
DB_RETRY_ATTEMPTS = 1
DB_RETRY_TIMEOUT_SECONDS = 1
