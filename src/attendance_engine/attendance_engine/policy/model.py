from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..core.constants import DEFAULT_WORK_END, DEFAULT_WORK_START


@dataclass(frozen=True)
class PolicyConfig:
    """Working-hours thresholds, times of day in the reference timezone."""

    work_start: time = DEFAULT_WORK_START
    work_end: time = DEFAULT_WORK_END


@dataclass(frozen=True)
class PolicyFlags:
    """Advisory classification of a day; never blocks recording."""

    is_late_login: bool = False
    is_early_logout: bool = False

    @property
    def labels(self) -> list[str]:
        out = []
        if self.is_late_login:
            out.append("Late login")
        if self.is_early_logout:
            out.append("Early logout")
        return out
