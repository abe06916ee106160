from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..core.constants import DEFAULT_PRESENCE_HIGH_PERCENT, DEFAULT_PRESENCE_MEDIUM_PERCENT
from ..core.enums import DayCellKind, PresenceLevel
from ..subjects.model import Subject


@dataclass(frozen=True)
class PresenceThresholds:
    high_percent: int = DEFAULT_PRESENCE_HIGH_PERCENT
    medium_percent: int = DEFAULT_PRESENCE_MEDIUM_PERCENT

    def level(self, percentage: int) -> PresenceLevel:
        if percentage >= self.high_percent:
            return PresenceLevel.HIGH
        if percentage >= self.medium_percent:
            return PresenceLevel.MEDIUM
        return PresenceLevel.LOW


@dataclass(frozen=True)
class MonthlyPresenceSummary:
    subject_key: str
    year: int
    month: int
    present_dates: frozenset[date] = field(default_factory=frozenset)
    present_days: int = 0
    total_days_in_month: int = 0
    percentage: int = 0
    level: PresenceLevel = PresenceLevel.LOW

    @property
    def display(self) -> str:
        return f"{self.present_days}/{self.total_days_in_month} ({self.percentage}%)"


@dataclass(frozen=True)
class DayCell:
    day: date
    kind: DayCellKind
    is_today: bool = False


@dataclass(frozen=True)
class PresenceRow:
    subject: Subject
    summary: MonthlyPresenceSummary
    cells: tuple[DayCell, ...]


@dataclass(frozen=True)
class PresenceGrid:
    """Month heatmap: one row per subject, one cell per calendar date."""

    year: int
    month: int
    dates: tuple[date, ...]
    rows: tuple[PresenceRow, ...]
