from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import ProxySubject, Subject


class SubjectDirectory(Protocol):
    def get(self, subject_key: str) -> Optional[Subject]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Subject]:
        raise NotImplementedError

    def list_managed_by(self, leader_key: str) -> Sequence[Subject]:
        raise NotImplementedError

    def get_proxy(self, proxy_subject_id: str) -> Optional[ProxySubject]:
        raise NotImplementedError

    def list_proxies(self, delegating_subject_id: str) -> Sequence[ProxySubject]:
        raise NotImplementedError
