from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from types import ModuleType
from typing import Optional

from .attendance.service import AttendanceService
from .common.clock import Clock, SystemClock
from .common.datetime_utils import get_zone, parse_time_of_day
from .core import constants
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventStore
from .events.repository import EventStore
from .events.service import EventRecordingService
from .policy.model import PolicyConfig
from .policy.mysql_policy_repository import MySQLPolicyConfigRepository
from .policy.repository import PolicyConfigRepository
from .policy.service import PolicyService
from .presence.model import PresenceThresholds
from .reports.service import AttendanceExportService
from .subjects.mysql_subject_repository import MySQLSubjectDirectory
from .subjects.repository import SubjectDirectory


@dataclass(frozen=True)
class Container:
    tz: tzinfo
    clock: Clock

    events_repo: EventStore
    subjects_repo: SubjectDirectory
    policy_repo: PolicyConfigRepository

    policy_service: PolicyService
    recording_service: EventRecordingService
    attendance_service: AttendanceService
    export_service: AttendanceExportService


def wire_container(
    *,
    events_repo: EventStore,
    subjects_repo: SubjectDirectory,
    policy_repo: PolicyConfigRepository,
    settings: Optional[ModuleType] = None,
    clock: Optional[Clock] = None,
) -> Container:
    """Assemble services over any repository implementations."""

    tz = get_zone(getattr(settings, "REFERENCE_TIMEZONE", constants.DEFAULT_REFERENCE_TIMEZONE))
    clock = clock or SystemClock()

    default_policy = PolicyConfig(
        work_start=parse_time_of_day(getattr(settings, "WORK_START_TIME", constants.DEFAULT_WORK_START)),
        work_end=parse_time_of_day(getattr(settings, "WORK_END_TIME", constants.DEFAULT_WORK_END)),
    )
    thresholds = PresenceThresholds(
        high_percent=int(getattr(settings, "PRESENCE_HIGH_PERCENT", constants.DEFAULT_PRESENCE_HIGH_PERCENT)),
        medium_percent=int(getattr(settings, "PRESENCE_MEDIUM_PERCENT", constants.DEFAULT_PRESENCE_MEDIUM_PERCENT)),
    )

    policy_service = PolicyService(policy_repo, default=default_policy)
    recording_service = EventRecordingService(events_repo, subjects_repo, clock=clock)
    attendance_service = AttendanceService(
        events_repo,
        subjects_repo,
        policy_service,
        tz=tz,
        clock=clock,
        thresholds=thresholds,
        refresh_interval_seconds=float(
            getattr(settings, "REFRESH_INTERVAL_SECONDS", constants.DEFAULT_REFRESH_INTERVAL_SECONDS)
        ),
    )
    export_service = AttendanceExportService(subjects_repo, tz=tz)

    return Container(
        tz=tz,
        clock=clock,
        events_repo=events_repo,
        subjects_repo=subjects_repo,
        policy_repo=policy_repo,
        policy_service=policy_service,
        recording_service=recording_service,
        attendance_service=attendance_service,
        export_service=export_service,
    )


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire_container(
        events_repo=MySQLEventStore(conn),
        subjects_repo=MySQLSubjectDirectory(conn),
        policy_repo=MySQLPolicyConfigRepository(conn),
        settings=settings,
    )
