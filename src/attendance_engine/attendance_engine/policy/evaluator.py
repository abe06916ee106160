from __future__ import annotations

from datetime import datetime, tzinfo
from typing import Optional, Sequence

from ..sessions.model import Session
from .model import PolicyConfig, PolicyFlags
from .rules.base import PolicyRule
from .rules.early_rule import EarlyLogoutRule
from .rules.late_rule import LateLoginRule


class PolicyEvaluator:
    """Runs each policy rule over one day's activity and collects the flags.

    When `check_ins` is omitted the session starts stand in for them; callers
    holding the raw events pass every valid check-in of the day so a replaced
    early check-in still counts for lateness.
    """

    def __init__(self, rules: Optional[Sequence[PolicyRule]] = None):
        self._rules = list(rules) if rules is not None else [LateLoginRule(), EarlyLogoutRule()]

    def evaluate(
        self,
        sessions: Sequence[Session],
        config: PolicyConfig,
        tz: tzinfo,
        *,
        check_ins: Optional[Sequence[datetime]] = None,
    ) -> PolicyFlags:
        ordered = sorted(sessions, key=lambda s: s.start)
        instants = sorted(check_ins) if check_ins is not None else [s.start for s in ordered]
        flags = {
            rule.flag_name: rule.evaluate(sessions=ordered, check_ins=instants, config=config, tz=tz)
            for rule in self._rules
        }
        return PolicyFlags(
            is_late_login=bool(flags.get(LateLoginRule.flag_name, False)),
            is_early_logout=bool(flags.get(EarlyLogoutRule.flag_name, False)),
        )
