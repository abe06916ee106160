"""Example: drive the engine through the service layer, without Flask.

Controllers stay thin; every calculation lives in the services.
"""

import importlib

from config import get_settings_module

from src.attendance_engine.attendance_engine.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    svc = container.attendance_service

    today = svc.today()
    for record in svc.daily_records(today):
        print(
            record.subject_key,
            record.total_display,
            "active" if record.is_active_now else "",
            "late" if record.is_late_login else "",
            "early" if record.is_early_logout else "",
        )

    for row in svc.presence_grid(today.year, today.month).rows:
        print(row.subject.display_name, row.summary.display, row.summary.level.value)


if __name__ == "__main__":
    main()
