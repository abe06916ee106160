from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles allowed to perform administrative actions."""

    ADMIN = "admin"
    TEAM_LEADER = "team_leader"
    EMPLOYEE = "employee"


class EventType(str, Enum):
    """Type of an attendance event as stored in the event log."""

    CHECK_IN = "checkin"
    CHECK_OUT = "checkout"

    @property
    def label(self) -> str:
        return "Check-in" if self is EventType.CHECK_IN else "Check-out"


class WorkStatus(str, Enum):
    WORKING = "Working"
    NOT_WORKING = "Not working"


class PresenceLevel(str, Enum):
    """Display bucket for a monthly presence percentage."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class DayCellKind(str, Enum):
    PRESENT = "present"
    WEEKEND = "weekend"
    ABSENT = "absent"
