from __future__ import annotations

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

import pytest

from src.attendance_engine.attendance_engine.attendance.service import AttendanceService
from src.attendance_engine.attendance_engine.common.clock import FixedClock
from src.attendance_engine.attendance_engine.core.enums import Role, WorkStatus
from src.attendance_engine.attendance_engine.core.exceptions import ValidationError
from src.attendance_engine.attendance_engine.events.model import AttendanceEvent
from src.attendance_engine.attendance_engine.policy.model import PolicyConfig
from src.attendance_engine.attendance_engine.policy.service import PolicyService
from src.attendance_engine.attendance_engine.subjects.model import Subject
from tests.fakes import InMemoryEvents, InMemoryPolicies, InMemorySubjects

BANGKOK = ZoneInfo("Asia/Bangkok")


def local(day: int, hour: int, minute: int = 0) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=BANGKOK)


def ev(event_id: str, subject: str, event_type: str, when) -> AttendanceEvent:
    return AttendanceEvent.create(
        event_id=event_id, subject_key=subject, subject_display_name=subject, event_type=event_type, time=when
    )


def make_service(events, *, now=None, policies=None):
    subjects = InMemorySubjects(
        subjects=[
            Subject("lead", "Lead", "lead@example.com", Role.TEAM_LEADER),
            Subject("alice", "Alice", "alice@example.com", managed_by="lead"),
            Subject("bob", "Bob", "bob@example.com", managed_by="lead"),
            Subject("carol", "Carol", "carol@example.com"),
        ]
    )
    store = InMemoryEvents(events=list(events))
    policies = policies or PolicyService(InMemoryPolicies(), default=PolicyConfig(work_start=time(10, 0), work_end=time(18, 0)))
    clock = FixedClock(now or local(2, 14, 15))
    return AttendanceService(store, subjects, policies, tz=BANGKOK, clock=clock), store, clock


def test_team_overview_counts_working_members():
    svc, _, _ = make_service(
        [
            ev("1", "alice", "checkin", local(2, 9)),
            ev("2", "bob", "checkin", local(2, 9)),
            ev("3", "bob", "checkout", local(2, 12)),
            ev("4", "carol", "checkin", local(2, 9)),
        ]
    )

    overview = svc.team_overview(leader_key="lead")

    assert overview.total == 2
    assert overview.working_count == 1
    assert {r.subject.subject_key: r.status.status for r in overview.rows} == {
        "alice": WorkStatus.WORKING,
        "bob": WorkStatus.NOT_WORKING,
    }
    assert svc.team_overview().total == 4


def test_daily_record_defaults_to_today():
    svc, _, _ = make_service([ev("1", "alice", "checkin", local(2, 10, 15))])

    record = svc.daily_record("alice")

    assert record.calendar_date == date(2026, 3, 2)
    assert record.is_active_now
    assert record.is_late_login
    assert record.total_duration_millis == 4 * 3_600_000


def test_policy_change_applies_on_next_evaluation():
    policies = PolicyService(InMemoryPolicies())
    svc, _, _ = make_service([ev("1", "alice", "checkin", local(2, 10, 15))], policies=policies)
    assert svc.daily_record("alice").is_late_login is True

    policies.update(current_role=Role.ADMIN, work_start="10:30", work_end="18:00")

    assert svc.daily_record("alice").is_late_login is False


def test_daily_records_cover_every_team_member():
    svc, _, _ = make_service(
        [ev("1", "alice", "checkin", local(2, 9)), ev("2", "alice", "checkout", local(2, 17))]
    )

    records = {r.subject_key: r for r in svc.daily_records(date(2026, 3, 2), leader_key="lead")}

    assert set(records) == {"alice", "bob"}
    assert records["alice"].total_display == "08:00:00"
    assert records["alice"].is_early_logout
    assert records["bob"].total_duration_millis == 0


def test_monthly_summary_and_grid():
    svc, _, _ = make_service([ev("1", "alice", "checkin", local(2, 9)), ev("2", "alice", "checkin", local(3, 9))])

    summary = svc.monthly_summary("alice", 2026, 3)
    grid = svc.presence_grid(2026, 3, leader_key="lead")

    assert summary.display == "2/31 (6%)"
    assert [row.subject.subject_key for row in grid.rows] == ["alice", "bob"]


@pytest.mark.parametrize("year,month", [(2026, 0), (2026, 13), (0, 5)])
def test_invalid_month_rejected(year, month):
    svc, _, _ = make_service([])

    with pytest.raises(ValidationError):
        svc.monthly_summary("alice", year, month)


def test_history_is_newest_first_and_limited():
    svc, _, _ = make_service(
        [
            ev("1", "alice", "checkin", local(2, 9)),
            ev("2", "alice", "checkout", local(2, 12)),
            ev("3", "alice", "checkin", local(2, 13)),
            ev("4", "alice", "checkout", "broken"),
        ]
    )

    rows = svc.history_ui("alice", limit=2)

    assert [r["id"] for r in rows] == ["3", "2"]
    assert rows[0]["label"] == "Check-in"
    assert rows[0]["time"] == "13:00:00"
    assert rows[0]["address"] == "(address unavailable)"


def test_live_daily_tracks_open_session_and_new_events():
    svc, store, clock = make_service([ev("1", "alice", "checkin", local(2, 10))], now=local(2, 10, 30))
    refresher = svc.live_daily("alice")

    refresher.reload()
    assert refresher.tick().total_display == "00:30:00"

    clock.advance(minutes=15)
    assert refresher.tick().total_display == "00:45:00"

    store.append(ev("2", "alice", "checkout", local(2, 11)))
    refresher.reload()
    record = refresher.tick()
    assert record.is_active_now is False
    assert record.total_display == "01:00:00"


def test_replaced_early_checkin_still_counts_as_on_time():
    svc, _, _ = make_service(
        [
            ev("1", "alice", "checkin", local(2, 9)),
            ev("2", "alice", "checkin", local(2, 11)),
            ev("3", "alice", "checkout", local(2, 12)),
        ]
    )

    record = svc.daily_record("alice", date(2026, 3, 2))

    assert [(s.start, s.end) for s in record.sessions] == [(local(2, 11), local(2, 12))]
    assert record.is_late_login is False
