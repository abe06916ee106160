from __future__ import annotations

from datetime import date, tzinfo
from typing import Iterable, Optional, Sequence

from ..common.clock import Clock
from ..common.datetime_utils import local_date, month_dates
from ..core.enums import DayCellKind
from ..events.model import AttendanceEvent, group_by_subject
from ..subjects.model import Subject
from .model import DayCell, MonthlyPresenceSummary, PresenceGrid, PresenceRow, PresenceThresholds


def round_half_up_percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


class CalendarAggregator:
    """Folds a month of check-ins into presence per subject.

    A date counts as present when the subject has at least one check-in on it
    (reference timezone), whether or not that check-in was ever paired.
    """

    def __init__(self, *, tz: tzinfo, thresholds: Optional[PresenceThresholds] = None, clock: Optional[Clock] = None):
        self._tz = tz
        self._thresholds = thresholds or PresenceThresholds()
        self._clock = clock

    def present_dates(self, events: Iterable[AttendanceEvent], year: int, month: int) -> frozenset[date]:
        out = set()
        for e in events:
            if not e.is_check_in or e.timestamp is None:
                continue
            d = local_date(e.timestamp, self._tz)
            if d.year == year and d.month == month:
                out.add(d)
        return frozenset(out)

    def summarize(self, subject_key: str, events: Iterable[AttendanceEvent], year: int, month: int) -> MonthlyPresenceSummary:
        total = len(month_dates(year, month))
        present = self.present_dates(events, year, month)
        percentage = round_half_up_percent(len(present), total)
        return MonthlyPresenceSummary(
            subject_key=subject_key,
            year=year,
            month=month,
            present_dates=present,
            present_days=len(present),
            total_days_in_month=total,
            percentage=percentage,
            level=self._thresholds.level(percentage),
        )

    def build_grid(
        self,
        subjects: Sequence[Subject],
        events: Iterable[AttendanceEvent],
        year: int,
        month: int,
    ) -> PresenceGrid:
        dates = tuple(month_dates(year, month))
        by_subject = group_by_subject(events)
        today = local_date(self._clock.now(), self._tz) if self._clock else None

        rows = []
        for subject in subjects:
            summary = self.summarize(subject.subject_key, by_subject.get(subject.subject_key, []), year, month)
            cells = tuple(
                DayCell(day=d, kind=self._classify(d, summary.present_dates), is_today=(d == today))
                for d in dates
            )
            rows.append(PresenceRow(subject=subject, summary=summary, cells=cells))

        return PresenceGrid(year=year, month=month, dates=dates, rows=tuple(rows))

    @staticmethod
    def _classify(day: date, present: frozenset[date]) -> DayCellKind:
        if day in present:
            return DayCellKind.PRESENT
        if day.weekday() >= 5:
            return DayCellKind.WEEKEND
        return DayCellKind.ABSENT
