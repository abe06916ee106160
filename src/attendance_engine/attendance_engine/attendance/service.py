from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Callable, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.datetime_utils import local_date
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_REFRESH_INTERVAL_SECONDS
from ..core.exceptions import ValidationError
from ..daily.aggregator import DailyAggregator
from ..daily.model import DailyRecord
from ..events.model import AttendanceEvent, group_by_subject
from ..events.repository import EventStore
from ..live.refresher import LiveRefresher
from ..policy.service import PolicyService
from ..presence.aggregator import CalendarAggregator
from ..presence.model import MonthlyPresenceSummary, PresenceGrid, PresenceThresholds
from ..sessions.reconstructor import SessionReconstructor
from ..status.resolver import CurrentStatus, StatusResolver
from ..subjects.model import Subject
from ..subjects.repository import SubjectDirectory


@dataclass(frozen=True)
class TeamStatusRow:
    subject: Subject
    status: CurrentStatus


@dataclass(frozen=True)
class TeamOverview:
    rows: list[TeamStatusRow]
    working_count: int
    total: int


class AttendanceService:
    """One evaluation pass per call: fetch a snapshot, then run the engine on it."""

    def __init__(
        self,
        events: EventStore,
        subjects: SubjectDirectory,
        policies: PolicyService,
        *,
        tz: tzinfo,
        clock: Clock | None = None,
        thresholds: PresenceThresholds | None = None,
        refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
    ):
        self._events = events
        self._subjects = subjects
        self._policies = policies
        self._tz = tz
        self._clock = clock or SystemClock()
        self._refresh_interval = refresh_interval_seconds

        self._reconstructor = SessionReconstructor()
        self._status = StatusResolver()
        self._daily = DailyAggregator(clock=self._clock, tz=tz)
        self._calendar = CalendarAggregator(tz=tz, thresholds=thresholds, clock=self._clock)

    def today(self) -> date:
        """Today's date in the reference timezone."""
        return self._daily.today()

    def current_status(self, subject_key: str) -> CurrentStatus:
        return self._status.resolve(self._events.list_for_subject(subject_key))

    def team_overview(self, *, leader_key: Optional[str] = None) -> TeamOverview:
        subjects = self._subjects_for(leader_key)
        statuses = self._status.resolve_by_subject(self._events.list_all())
        idle = self._status.resolve([])

        rows = [TeamStatusRow(subject=s, status=statuses.get(s.subject_key, idle)) for s in subjects]
        working = sum(1 for r in rows if r.status.is_working)
        return TeamOverview(rows=rows, working_count=working, total=len(rows))

    def daily_record(self, subject_key: str, target_date: Optional[date] = None) -> DailyRecord:
        return self._evaluate_day(subject_key, self._events.list_for_subject(subject_key), target_date)

    def daily_records(self, target_date: Optional[date] = None, *, leader_key: Optional[str] = None) -> list[DailyRecord]:
        by_subject = group_by_subject(self._events.list_all())
        return [
            self._evaluate_day(s.subject_key, by_subject.get(s.subject_key, []), target_date)
            for s in self._subjects_for(leader_key)
        ]

    def monthly_summary(self, subject_key: str, year: int, month: int) -> MonthlyPresenceSummary:
        _check_month(year, month)
        return self._calendar.summarize(subject_key, self._events.list_for_subject(subject_key), year, month)

    def presence_grid(self, year: int, month: int, *, leader_key: Optional[str] = None) -> PresenceGrid:
        _check_month(year, month)
        return self._calendar.build_grid(self._subjects_for(leader_key), self._events.list_all(), year, month)

    def history_ui(self, subject_key: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> list[dict]:
        rows = sorted(
            (e for e in self._events.list_for_subject(subject_key) if e.timestamp is not None),
            key=AttendanceEvent.sort_key,
            reverse=True,
        )
        return [self._to_ui(e) for e in rows[:limit]]

    def live_daily(
        self,
        subject_key: str,
        *,
        on_update: Optional[Callable[[DailyRecord], None]] = None,
    ) -> LiveRefresher[DailyRecord]:
        """Cancelable refresher keeping today's record (and open session) current."""

        def evaluate(snapshot: Sequence[AttendanceEvent], now: datetime) -> DailyRecord:
            return self._evaluate_day(subject_key, snapshot, local_date(now, self._tz))

        return LiveRefresher(
            fetch=lambda: self._events.list_for_subject(subject_key),
            evaluate=evaluate,
            clock=self._clock,
            interval_seconds=self._refresh_interval,
            on_update=on_update,
        )

    def _evaluate_day(self, subject_key: str, events, target_date: Optional[date]) -> DailyRecord:
        events = list(events)
        sessions = self._reconstructor.reconstruct(events)
        return self._daily.aggregate(
            subject_key,
            sessions,
            target_date or self._daily.today(),
            self._policies.current(),
            events=events,
        )

    def _subjects_for(self, leader_key: Optional[str]) -> Sequence[Subject]:
        if leader_key:
            return self._subjects.list_managed_by(leader_key)
        return self._subjects.list_all()

    def _to_ui(self, e: AttendanceEvent) -> dict:
        local = e.timestamp.astimezone(self._tz)
        return {
            "id": e.event_id,
            "type": e.event_type.value,
            "label": e.event_type.label,
            "date": local.strftime("%Y-%m-%d"),
            "time": local.strftime("%H:%M:%S"),
            "lat": e.lat,
            "lng": e.lng,
            "address": e.address or "(address unavailable)",
            "platform": e.platform,
            "delegated_by": e.delegated_by,
        }


def _check_month(year: int, month: int) -> None:
    if not 1 <= int(month) <= 12 or int(year) < 1:
        raise ValidationError("Invalid month")
