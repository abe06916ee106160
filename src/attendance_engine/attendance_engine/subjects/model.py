from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Subject:
    """Domain entity: a person whose attendance is tracked."""

    subject_key: str
    display_name: str
    email: Optional[str] = None
    role: Role = Role.EMPLOYEE
    managed_by: Optional[str] = None


@dataclass(frozen=True)
class ProxySubject:
    """A delegated worker identity recorded through a base subject.

    The relation is explicit; nothing is derived from display names.
    """

    proxy_subject_id: str
    delegating_subject_id: str
    label: str
