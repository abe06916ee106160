from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from ..core.enums import WorkStatus
from ..events.model import AttendanceEvent, group_by_subject, with_valid_time


@dataclass(frozen=True)
class CurrentStatus:
    status: WorkStatus
    latest_event: Optional[AttendanceEvent] = None

    @property
    def is_working(self) -> bool:
        return self.status is WorkStatus.WORKING


class StatusResolver:
    """Working / not working from the single most recent event.

    Latest means max (timestamp, event_id); no other history is consulted.
    """

    def resolve(self, events: Iterable[AttendanceEvent]) -> CurrentStatus:
        candidates = with_valid_time(events)
        if not candidates:
            return CurrentStatus(status=WorkStatus.NOT_WORKING)

        latest = max(candidates, key=AttendanceEvent.sort_key)
        status = WorkStatus.WORKING if latest.is_check_in else WorkStatus.NOT_WORKING
        return CurrentStatus(status=status, latest_event=latest)

    def resolve_by_subject(self, events: Iterable[AttendanceEvent]) -> dict[str, CurrentStatus]:
        return {key: self.resolve(items) for key, items in group_by_subject(events).items()}

    def working_count(self, subject_keys: Iterable[str], events: Iterable[AttendanceEvent]) -> int:
        statuses = self.resolve_by_subject(events)
        return sum(1 for key in subject_keys if key in statuses and statuses[key].is_working)
