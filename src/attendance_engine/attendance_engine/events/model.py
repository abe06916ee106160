from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_event_time
from ..core.enums import EventType


@dataclass(frozen=True)
class Location:
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one immutable check-in or check-out.

    `timestamp` is the parsed UTC instant, or None when `raw_time` could not be
    parsed; such events stay visible in exports but never enter aggregation.
    """

    event_id: str
    subject_key: str
    subject_display_name: str
    event_type: EventType
    timestamp: Optional[datetime]
    raw_time: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    address: Optional[str] = None
    # Opaque client metadata; read-only and left out of hashing.
    device: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)
    delegated_by: Optional[str] = None

    @property
    def is_check_in(self) -> bool:
        return self.event_type is EventType.CHECK_IN

    @property
    def has_valid_time(self) -> bool:
        return self.timestamp is not None

    @property
    def platform(self) -> str:
        return str(self.device.get("platform") or "")

    def sort_key(self) -> tuple[datetime, str]:
        """Ascending order by instant, ties broken by event id."""
        return (self.timestamp, self.event_id)

    @classmethod
    def create(
        cls,
        *,
        event_id: str,
        subject_key: str,
        subject_display_name: str,
        event_type: EventType | str,
        time: Any,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
        address: Optional[str] = None,
        device: Optional[Mapping[str, Any]] = None,
        delegated_by: Optional[str] = None,
    ) -> "AttendanceEvent":
        raw = time.isoformat() if isinstance(time, datetime) else ("" if time is None else str(time))
        return cls(
            event_id=str(event_id),
            subject_key=str(subject_key),
            subject_display_name=subject_display_name,
            event_type=EventType(event_type),
            timestamp=parse_event_time(time),
            raw_time=raw,
            lat=lat,
            lng=lng,
            address=address,
            device=MappingProxyType(dict(device or {})),
            delegated_by=delegated_by,
        )


def with_valid_time(events) -> list[AttendanceEvent]:
    return [e for e in events if e.timestamp is not None]


def sort_events(events) -> list[AttendanceEvent]:
    """Events with a usable timestamp, ascending by (timestamp, event_id)."""
    return sorted(with_valid_time(events), key=AttendanceEvent.sort_key)


def group_by_subject(events) -> dict[str, list[AttendanceEvent]]:
    grouped: dict[str, list[AttendanceEvent]] = {}
    for e in events:
        grouped.setdefault(e.subject_key, []).append(e)
    return grouped
