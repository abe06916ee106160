"""Settings shared by every environment module."""

import os

REFERENCE_TIMEZONE = os.getenv("REFERENCE_TIMEZONE", "Asia/Bangkok")

# Default working hours; an admin-saved policy row overrides them.
WORK_START_TIME = os.getenv("WORK_START_TIME", "10:00")
WORK_END_TIME = os.getenv("WORK_END_TIME", "18:00")

PRESENCE_HIGH_PERCENT = int(os.getenv("PRESENCE_HIGH_PERCENT", "85"))
PRESENCE_MEDIUM_PERCENT = int(os.getenv("PRESENCE_MEDIUM_PERCENT", "60"))

REFRESH_INTERVAL_SECONDS = float(os.getenv("REFRESH_INTERVAL_SECONDS", "10"))


def db_config_from_env(default_password: str = "") -> dict:
    return {
        "host": os.getenv("DB_HOST", "localhost"),
        "port": int(os.getenv("DB_PORT", "3306")),
        "user": os.getenv("DB_USER", "root"),
        "password": os.getenv("DB_PASSWORD", default_password),
        "database": os.getenv("DB_NAME", "attendance_db"),
    }
