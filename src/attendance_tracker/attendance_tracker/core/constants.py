"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

BUSINESS_TIMEZONE = "Asia/Jakarta"
DAY_CUTOVER_HOUR = 4

MAX_SESSIONS_PER_DAY = 5
DEFAULT_SHIFT = "Management"

SHIFT_1_LATE_AFTER_MINUTES = 7 * 60
SHIFT_2_LATE_AFTER_MINUTES = 12 * 60
RESUME_LATE_AFTER_MINUTES = 7 * 60

AUTO_CLOSE_NOTE = "Auto-closed at 04:00"

DEFAULT_EMPLOYEE_PASSWORD = "password123"
DEFAULT_HISTORY_LIMIT = 500
MAX_COMPLAINT_PHOTOS = 10
