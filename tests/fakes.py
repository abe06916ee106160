"""In-memory repositories shared by the service and controller tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Sequence

from src.attendance_engine.attendance_engine.core.exceptions import EventStoreError
from src.attendance_engine.attendance_engine.events.model import AttendanceEvent
from src.attendance_engine.attendance_engine.policy.model import PolicyConfig
from src.attendance_engine.attendance_engine.subjects.model import ProxySubject, Subject


@dataclass
class InMemoryEvents:
    events: list[AttendanceEvent] = field(default_factory=list)
    fail: bool = False

    def list_for_subject(self, subject_key: str) -> Sequence[AttendanceEvent]:
        self._check()
        return [e for e in self.events if e.subject_key == subject_key]

    def list_all(self) -> Sequence[AttendanceEvent]:
        self._check()
        return list(self.events)

    def append(self, event: AttendanceEvent) -> None:
        self.append_many([event])

    def append_many(self, events: Sequence[AttendanceEvent]) -> None:
        self._check()
        self.events.extend(events)

    def _check(self) -> None:
        if self.fail:
            raise EventStoreError("store offline")


@dataclass
class InMemorySubjects:
    subjects: list[Subject] = field(default_factory=list)
    proxies: list[ProxySubject] = field(default_factory=list)

    def get(self, subject_key: str) -> Optional[Subject]:
        return next((s for s in self.subjects if s.subject_key == subject_key), None)

    def list_all(self) -> Sequence[Subject]:
        return list(self.subjects)

    def list_managed_by(self, leader_key: str) -> Sequence[Subject]:
        return [s for s in self.subjects if s.managed_by == leader_key]

    def get_proxy(self, proxy_subject_id: str) -> Optional[ProxySubject]:
        return next((p for p in self.proxies if p.proxy_subject_id == proxy_subject_id), None)

    def list_proxies(self, delegating_subject_id: str) -> Sequence[ProxySubject]:
        return [p for p in self.proxies if p.delegating_subject_id == delegating_subject_id]


@dataclass
class InMemoryPolicies:
    config: Optional[PolicyConfig] = None

    def get(self) -> Optional[PolicyConfig]:
        return self.config

    def save(self, config: PolicyConfig) -> None:
        self.config = config
