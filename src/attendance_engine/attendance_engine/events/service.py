from __future__ import annotations

import logging
import uuid
from typing import Any, Mapping, Optional, Sequence

from ..common.clock import Clock, SystemClock
from ..common.validators import require_non_empty
from ..core.enums import EventType
from ..core.exceptions import ValidationError
from ..subjects.repository import SubjectDirectory
from .model import AttendanceEvent, Location
from .repository import EventStore

logger = logging.getLogger(__name__)


def new_event_id(prefix: str = "a") -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class EventRecordingService:
    """Creates check-in/check-out events and appends them to the store.

    Location and device metadata are supplied by the caller; the timestamp
    always comes from the injected clock.
    """

    def __init__(self, events: EventStore, subjects: SubjectDirectory, *, clock: Clock | None = None):
        self._events = events
        self._subjects = subjects
        self._clock = clock or SystemClock()

    def record(
        self,
        subject_key: str,
        event_type: EventType | str,
        *,
        location: Optional[Location] = None,
        device: Optional[Mapping[str, Any]] = None,
    ) -> AttendanceEvent:
        subject_key = require_non_empty(subject_key, "Subject")
        subject = self._subjects.get(subject_key)
        if not subject:
            raise ValidationError("Employee does not exist")

        event = self._build(
            event_id=new_event_id("a"),
            subject_key=subject.subject_key,
            display_name=subject.display_name,
            event_type=_event_type(event_type),
            location=location,
            device=device,
        )
        self._events.append(event)
        logger.info("Recorded %s for %s", event.event_type.value, subject_key)
        return event

    def record_bulk(
        self,
        actor_key: str,
        event_type: EventType | str,
        subject_keys: Sequence[str],
        *,
        location: Optional[Location] = None,
        device: Optional[Mapping[str, Any]] = None,
    ) -> list[AttendanceEvent]:
        """One actor records the same action for many subjects on a shared device."""

        if not subject_keys:
            raise ValidationError("Select at least one employee")

        actor = self._subjects.get(require_non_empty(actor_key, "Actor"))
        if not actor:
            raise ValidationError("Team leader does not exist")

        targets = []
        for key in dict.fromkeys(subject_keys):
            subject = self._subjects.get(key)
            if not subject:
                raise ValidationError(f"Employee {key} does not exist")
            targets.append(subject)

        etype = _event_type(event_type)
        shared_device = {
            **dict(device or {}),
            "sharedDevice": True,
            "checkedInBy": actor.display_name,
            "leaderId": actor.subject_key,
        }
        at = self._clock.now()
        batch = [
            self._build(
                event_id=new_event_id("tl"),
                subject_key=s.subject_key,
                display_name=s.display_name,
                event_type=etype,
                location=location,
                device=shared_device,
                delegated_by=actor.subject_key,
                at=at,
            )
            for s in targets
        ]
        self._events.append_many(batch)
        logger.info("Recorded bulk %s for %d subjects via %s", etype.value, len(batch), actor.subject_key)
        return batch

    def record_for_proxies(
        self,
        delegating_key: str,
        event_type: EventType | str,
        proxy_ids: Sequence[str],
        *,
        location: Optional[Location] = None,
        device: Optional[Mapping[str, Any]] = None,
    ) -> list[AttendanceEvent]:
        """Record for delegated workers; each proxy must belong to the delegating subject."""

        if not proxy_ids:
            raise ValidationError("Select at least one worker")

        delegating = self._subjects.get(require_non_empty(delegating_key, "Subject"))
        if not delegating:
            raise ValidationError("Employee does not exist")

        proxies = []
        for proxy_id in dict.fromkeys(proxy_ids):
            proxy = self._subjects.get_proxy(proxy_id)
            if not proxy or proxy.delegating_subject_id != delegating.subject_key:
                raise ValidationError(f"Worker {proxy_id} is not registered to {delegating.display_name}")
            proxies.append(proxy)

        etype = _event_type(event_type)
        at = self._clock.now()
        batch = [
            self._build(
                event_id=new_event_id("a"),
                subject_key=p.proxy_subject_id,
                display_name=p.label,
                event_type=etype,
                location=location,
                device=device,
                delegated_by=delegating.subject_key,
                at=at,
            )
            for p in proxies
        ]
        self._events.append_many(batch)
        logger.info("Recorded %s for %d workers via %s", etype.value, len(batch), delegating.subject_key)
        return batch

    def _build(
        self,
        *,
        event_id: str,
        subject_key: str,
        display_name: str,
        event_type: EventType,
        location: Optional[Location],
        device: Optional[Mapping[str, Any]],
        delegated_by: Optional[str] = None,
        at=None,
    ) -> AttendanceEvent:
        loc = location or Location()
        return AttendanceEvent.create(
            event_id=event_id,
            subject_key=subject_key,
            subject_display_name=display_name,
            event_type=event_type,
            time=at or self._clock.now(),
            lat=loc.lat,
            lng=loc.lng,
            address=loc.address,
            device=device,
            delegated_by=delegated_by,
        )


def _event_type(value: EventType | str) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        raise ValidationError("Event type must be 'checkin' or 'checkout'")
