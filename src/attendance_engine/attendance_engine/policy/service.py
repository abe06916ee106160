from __future__ import annotations

import logging
from datetime import time

from ..common.datetime_utils import parse_time_of_day
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import PolicyConfig
from .repository import PolicyConfigRepository

logger = logging.getLogger(__name__)


class PolicyService:
    """Reads the working-hours policy on every pass; only admins change it."""

    def __init__(self, policies: PolicyConfigRepository, *, default: PolicyConfig | None = None):
        self._policies = policies
        self._default = default or PolicyConfig()

    def current(self) -> PolicyConfig:
        return self._policies.get() or self._default

    def update(self, *, current_role: Role, work_start: str | time, work_end: str | time) -> PolicyConfig:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only an admin can change working hours")

        try:
            start = parse_time_of_day(work_start)
            end = parse_time_of_day(work_end)
        except (TypeError, ValueError):
            raise ValidationError("Working hours must be HH:MM")

        if start >= end:
            raise ValidationError("Work start must be earlier than work end")

        config = PolicyConfig(work_start=start, work_end=end)
        self._policies.save(config)
        logger.info("Working hours updated to %s-%s", start.strftime("%H:%M"), end.strftime("%H:%M"))
        return config
