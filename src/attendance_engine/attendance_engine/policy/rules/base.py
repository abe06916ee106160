from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime, tzinfo
from typing import Sequence

from ...sessions.model import Session
from ..model import PolicyConfig


class PolicyRule(ABC):
    """Strategy Pattern: one advisory classification of a day's activity.

    `sessions` are the day's sessions in chronological order; `check_ins` are
    the day's valid check-in instants, ascending, including any that a later
    check-in replaced during reconstruction.
    """

    flag_name: str = ""

    @abstractmethod
    def evaluate(
        self,
        *,
        sessions: Sequence[Session],
        check_ins: Sequence[datetime],
        config: PolicyConfig,
        tz: tzinfo,
    ) -> bool:
        raise NotImplementedError
