from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional

from ..events.model import AttendanceEvent, group_by_subject, sort_events
from .model import Session

logger = logging.getLogger(__name__)


class SessionReconstructor:
    """Pairs a subject's check-ins and check-outs into sessions.

    Rules:
    - events are ordered by (timestamp, event_id); unparseable times are skipped
    - a check-in always (re)sets the open start; an earlier unclosed start is lost
    - a check-out without an open start is dropped
    - a start left open after the last event becomes one trailing open session
    """

    def reconstruct(self, events: Iterable[AttendanceEvent]) -> list[Session]:
        sessions: list[Session] = []
        open_start: Optional[datetime] = None
        open_event: Optional[AttendanceEvent] = None

        for event in sort_events(events):
            if event.is_check_in:
                if open_event is not None:
                    logger.debug(
                        "Check-in %s replaces open start %s for %s",
                        event.event_id,
                        open_event.event_id,
                        event.subject_key,
                    )
                open_start = event.timestamp
                open_event = event
                continue

            if open_start is None:
                logger.debug("Dropping unmatched check-out %s for %s", event.event_id, event.subject_key)
                continue

            sessions.append(Session(subject_key=event.subject_key, start=open_start, end=event.timestamp))
            open_start = None
            open_event = None

        if open_event is not None:
            sessions.append(Session(subject_key=open_event.subject_key, start=open_start))

        return sessions

    def reconstruct_by_subject(self, events: Iterable[AttendanceEvent]) -> dict[str, list[Session]]:
        return {key: self.reconstruct(items) for key, items in group_by_subject(events).items()}

    def open_session(self, events: Iterable[AttendanceEvent]) -> Optional[Session]:
        sessions = self.reconstruct(events)
        if sessions and sessions[-1].is_open:
            return sessions[-1]
        return None
