from __future__ import annotations

from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from src.attendance_engine.attendance_engine.policy.evaluator import PolicyEvaluator
from src.attendance_engine.attendance_engine.policy.model import PolicyConfig
from src.attendance_engine.attendance_engine.policy.rules.early_rule import EarlyLogoutRule
from src.attendance_engine.attendance_engine.policy.rules.late_rule import LateLoginRule
from src.attendance_engine.attendance_engine.sessions.model import Session

BANGKOK = ZoneInfo("Asia/Bangkok")
CONFIG = PolicyConfig(work_start=time(10, 0), work_end=time(18, 0))


def local(hour: int, minute: int = 0, second: int = 0, microsecond: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, second, microsecond, tzinfo=BANGKOK)


def test_checkin_exactly_at_start_is_not_late():
    sessions = [Session("s", local(10, 0), local(18, 0))]

    flags = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_late_login is False


def test_checkin_one_millisecond_after_start_is_late():
    sessions = [Session("s", local(10, 0) + timedelta(milliseconds=1), local(18, 0))]

    flags = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_late_login is True


def test_only_first_session_decides_lateness():
    sessions = [
        Session("s", local(12, 0), local(13, 0)),
        Session("s", local(9, 0), local(11, 0)),
    ]

    flags = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_late_login is False


def test_checkout_before_end_is_early():
    sessions = [Session("s", local(9, 50), local(17, 59, 59))]

    flags = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_early_logout is True
    assert flags.labels == ["Early logout"]


def test_checkout_exactly_at_end_is_not_early():
    sessions = [Session("s", local(9, 50), local(18, 0))]

    assert PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK).is_early_logout is False


def test_open_last_session_is_never_early():
    sessions = [
        Session("s", local(9, 0), local(12, 0)),
        Session("s", local(13, 0)),
    ]

    flags = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_early_logout is False


def test_empty_day_has_no_flags():
    flags = PolicyEvaluator().evaluate([], CONFIG, BANGKOK)

    assert flags.is_late_login is False
    assert flags.is_early_logout is False
    assert flags.labels == []


def test_times_are_judged_in_reference_timezone():
    # 02:30 UTC is 09:30 in Bangkok: on time there, late if read as UTC+10.
    start = datetime(2026, 3, 2, 2, 30, tzinfo=ZoneInfo("UTC"))
    sessions = [Session("s", start, start + timedelta(hours=9))]

    assert PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK).is_late_login is False
    assert PolicyEvaluator().evaluate(sessions, CONFIG, ZoneInfo("Australia/Brisbane")).is_late_login is True


def test_evaluator_runs_only_configured_rules():
    sessions = [Session("s", local(11, 0), local(12, 0))]

    flags = PolicyEvaluator(rules=[EarlyLogoutRule()]).evaluate(sessions, CONFIG, BANGKOK)

    assert flags.is_late_login is False
    assert flags.is_early_logout is True
    assert LateLoginRule().evaluate(sessions=sessions, check_ins=[local(11, 0)], config=CONFIG, tz=BANGKOK) is True


def test_lateness_uses_supplied_checkins_over_session_starts():
    sessions = [Session("s", local(11, 0), local(12, 0))]

    replaced = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK, check_ins=[local(11, 0), local(9, 0)])
    only_late = PolicyEvaluator().evaluate(sessions, CONFIG, BANGKOK, check_ins=[local(11, 0)])

    assert replaced.is_late_login is False
    assert only_late.is_late_login is True
