"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

AUDIT_TABLE_NAME = "time_records"
STATUS_SEPARATOR = "+"

DEFAULT_WORK_START = "09:00"
DEFAULT_WORK_END = "17:00"

DEFAULT_CLEANUP_DAYS = 30
DEFAULT_STANDARD_WORK_HOURS = 8.0
DEFAULT_AUDIT_LIMIT = 100

DEFAULT_SESSION_TTL_HOURS = 8
DEFAULT_SESSION_MAX_ENTRIES = 1000

# Record dates are resolved in Japan Standard Time regardless of server locale.
BUSINESS_UTC_OFFSET_HOURS = 9
