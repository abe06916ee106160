from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceEvent


class EventStore(Protocol):
    """Append-only source of attendance events.

    Implementations return events in no particular order; callers sort.
    Read/write failures raise EventStoreError.
    """

    def list_for_subject(self, subject_key: str) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def append(self, event: AttendanceEvent) -> None:
        raise NotImplementedError

    def append_many(self, events: Sequence[AttendanceEvent]) -> None:
        """Store a batch sharing one delegated action (all or nothing)."""

        raise NotImplementedError
