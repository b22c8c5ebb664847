"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_WORKING_DAYS_PER_MONTH = 26
MIN_WORKING_DAYS_PER_MONTH = 1
ABSENT_DEDUCTION_ID = "absent-deduction"
ABSENT_DEDUCTION_NAME = "Absent Deduction"

DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_CACHE_TTL_SECONDS = 300

DEFAULT_RETRY_ATTEMPTS = 5
DEFAULT_RETRY_BASE_DELAY_SECONDS = 0.1
DEFAULT_RETRY_TIMEOUT_SECONDS = 30.0

DEFAULT_BASE_SALARY = 30000
DEFAULT_TOTAL_LEAVES_ALLOWED = 30
DEFAULT_CONVEYANCE_ALLOWANCE = 5000
DEFAULT_MEDICAL_ALLOWANCE = 3000

# leave_type -> (allowed days per year, carry forward days)
DEFAULT_LEAVE_POLICIES = {
    "sick": (12, 3),
    "casual": (12, 0),
    "earned": (30, 90),
    "unpaid": (365, 0),
    "maternity": (84, 0),
    "paternity": (14, 0),
}

COLLECTION_ATTENDANCE = "attendance"
COLLECTION_LEAVES = "leaves"
COLLECTION_LEAVE_BALANCE = "leaveBalance"
COLLECTION_SALARY = "salary"
COLLECTION_SALARY_CONFIG = "salaryConfig"
