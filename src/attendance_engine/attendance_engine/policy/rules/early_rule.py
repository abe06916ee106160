from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Sequence

from ...common.datetime_utils import local_time_of_day
from ...sessions.model import Session
from ..model import PolicyConfig
from .base import PolicyRule


class EarlyLogoutRule(PolicyRule):
    """Closing check-out strictly before work end.

    Only judged once the last session is closed; an open session may still end later.
    """

    flag_name = "is_early_logout"

    def evaluate(
        self,
        *,
        sessions: Sequence[Session],
        check_ins: Sequence[datetime],
        config: PolicyConfig,
        tz: tzinfo,
    ) -> bool:
        if not sessions:
            return False
        last = sessions[-1]
        if last.is_open:
            return False
        return local_time_of_day(last.end, tz) < config.work_end
