from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Sequence

from ...common.datetime_utils import local_time_of_day
from ...sessions.model import Session
from ..model import PolicyConfig
from .base import PolicyRule


class LateLoginRule(PolicyRule):
    """First check-in of the day strictly after work start (equal is on time)."""

    flag_name = "is_late_login"

    def evaluate(
        self,
        *,
        sessions: Sequence[Session],
        check_ins: Sequence[datetime],
        config: PolicyConfig,
        tz: tzinfo,
    ) -> bool:
        if not check_ins:
            return False
        return local_time_of_day(check_ins[0], tz) > config.work_start
