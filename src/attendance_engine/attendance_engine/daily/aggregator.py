from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Iterable, Optional

from ..common.clock import Clock
from ..common.datetime_utils import local_date
from ..events.model import AttendanceEvent
from ..policy.evaluator import PolicyEvaluator
from ..policy.model import PolicyConfig
from ..sessions.model import Session
from .model import DailyRecord


class DailyAggregator:
    """Builds one DailyRecord per subject and reference-timezone date.

    Closed sessions contribute their duration. An open session adds
    `now - start` only when the target date is today per the clock; an open
    session on a past date contributes nothing (its end is unknown).
    Lateness is judged on the day's first valid check-in when `events` are
    given, even if reconstruction replaced it with a later one.
    """

    def __init__(self, *, clock: Clock, tz: tzinfo, evaluator: Optional[PolicyEvaluator] = None):
        self._clock = clock
        self._tz = tz
        self._evaluator = evaluator or PolicyEvaluator()

    def sessions_on(self, sessions: Iterable[Session], target_date: date) -> list[Session]:
        day = [s for s in sessions if local_date(s.start, self._tz) == target_date]
        day.sort(key=lambda s: s.start)
        return day

    def check_ins_on(self, events: Iterable[AttendanceEvent], target_date: date) -> list[datetime]:
        return sorted(
            e.timestamp
            for e in events
            if e.is_check_in and e.timestamp is not None and local_date(e.timestamp, self._tz) == target_date
        )

    def aggregate(
        self,
        subject_key: str,
        sessions: Iterable[Session],
        target_date: date,
        config: PolicyConfig,
        *,
        events: Optional[Iterable[AttendanceEvent]] = None,
    ) -> DailyRecord:
        day = self.sessions_on(sessions, target_date)
        now = self._clock.now()
        is_today = local_date(now, self._tz) == target_date

        total = sum(s.duration_millis for s in day if not s.is_open)
        open_sessions = [s for s in day if s.is_open]
        is_active = is_today and len(open_sessions) == 1
        if is_active:
            total += open_sessions[0].elapsed_millis(now)

        check_ins = self.check_ins_on(events, target_date) if events is not None else None
        flags = self._evaluator.evaluate(day, config, self._tz, check_ins=check_ins)
        return DailyRecord(
            subject_key=subject_key,
            calendar_date=target_date,
            sessions=tuple(day),
            total_duration_millis=total,
            is_active_now=is_active,
            is_late_login=flags.is_late_login,
            is_early_logout=flags.is_early_logout,
        )

    def today(self) -> date:
        return local_date(self._clock.now(), self._tz)
