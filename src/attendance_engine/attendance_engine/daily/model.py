from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..common.datetime_utils import format_hms, split_millis
from ..sessions.model import Session


@dataclass(frozen=True)
class DailyRecord:
    """Read-model: one subject's attendance on one reference-timezone date.

    Recomputed on every evaluation; never persisted.
    """

    subject_key: str
    calendar_date: date
    sessions: tuple[Session, ...] = field(default_factory=tuple)
    total_duration_millis: int = 0
    is_active_now: bool = False
    is_late_login: bool = False
    is_early_logout: bool = False

    @property
    def hours_minutes_seconds(self) -> tuple[int, int, int]:
        return split_millis(self.total_duration_millis)

    @property
    def total_display(self) -> str:
        return format_hms(self.total_duration_millis)
