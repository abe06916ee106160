"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_REFERENCE_TIMEZONE = "Asia/Bangkok"
DEFAULT_WORK_START = time(10, 0)
DEFAULT_WORK_END = time(18, 0)

DEFAULT_PRESENCE_HIGH_PERCENT = 85
DEFAULT_PRESENCE_MEDIUM_PERCENT = 60

DEFAULT_REFRESH_INTERVAL_SECONDS = 10
DEFAULT_HISTORY_LIMIT = 25

EXPORT_COLUMNS = ("Name", "Email", "Date", "Time", "Type", "Address", "Platform")
