from __future__ import annotations

from datetime import datetime, timedelta, timezone

from src.attendance_engine.attendance_engine.core.enums import EventType
from src.attendance_engine.attendance_engine.events.model import AttendanceEvent
from src.attendance_engine.attendance_engine.sessions.reconstructor import SessionReconstructor
from src.attendance_engine.attendance_engine.status.resolver import StatusResolver


def ev(event_id: str, event_type: EventType, time, subject: str = "alice@example.com") -> AttendanceEvent:
    return AttendanceEvent.create(
        event_id=event_id,
        subject_key=subject,
        subject_display_name="Alice",
        event_type=event_type,
        time=time,
    )


def utc(hour: int, minute: int = 0, day: int = 2) -> datetime:
    return datetime(2026, 3, day, hour, minute, tzinfo=timezone.utc)


def test_alternating_pairs_sum_to_span():
    events = [
        ev("1", EventType.CHECK_IN, utc(2)),
        ev("2", EventType.CHECK_OUT, utc(5)),
        ev("3", EventType.CHECK_IN, utc(5)),
        ev("4", EventType.CHECK_OUT, utc(11, 30)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    total = sum(s.duration_millis for s in sessions)
    assert total == (utc(11, 30) - utc(2)) // timedelta(milliseconds=1)
    assert [s.is_open for s in sessions] == [False, False]


def test_unsorted_input_is_ordered_before_pairing():
    events = [
        ev("4", EventType.CHECK_OUT, utc(12)),
        ev("1", EventType.CHECK_IN, utc(9)),
        ev("3", EventType.CHECK_IN, utc(11)),
        ev("2", EventType.CHECK_OUT, utc(10)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert [(s.start, s.end) for s in sessions] == [(utc(9), utc(10)), (utc(11), utc(12))]


def test_consecutive_checkins_keep_only_latest_start():
    events = [
        ev("1", EventType.CHECK_IN, utc(9)),
        ev("2", EventType.CHECK_IN, utc(11)),
        ev("3", EventType.CHECK_OUT, utc(12)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert len(sessions) == 1
    assert sessions[0].start == utc(11)
    assert sessions[0].end == utc(12)
    assert sessions[0].duration_millis == 3_600_000


def test_checkout_without_open_session_is_dropped():
    events = [
        ev("1", EventType.CHECK_OUT, utc(8)),
        ev("2", EventType.CHECK_IN, utc(9)),
        ev("3", EventType.CHECK_OUT, utc(10)),
        ev("4", EventType.CHECK_OUT, utc(11)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert [(s.start, s.end) for s in sessions] == [(utc(9), utc(10))]


def test_trailing_checkin_becomes_open_session():
    events = [
        ev("1", EventType.CHECK_IN, utc(2)),
        ev("2", EventType.CHECK_OUT, utc(4)),
        ev("3", EventType.CHECK_IN, utc(5)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert sessions[-1].is_open
    assert sessions[-1].start == utc(5)
    assert sessions[-1].duration_millis == 0
    assert sessions[-1].elapsed_millis(utc(7)) == 2 * 3_600_000


def test_equal_timestamps_break_ties_by_event_id():
    same = utc(9)
    events = [
        ev("b", EventType.CHECK_OUT, same),
        ev("a", EventType.CHECK_IN, same),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert len(sessions) == 1
    assert sessions[0].start == sessions[0].end == same


def test_unparseable_timestamps_are_skipped():
    events = [
        ev("1", EventType.CHECK_IN, utc(9)),
        ev("2", EventType.CHECK_OUT, "not-a-time"),
        ev("3", EventType.CHECK_OUT, utc(10)),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert [(s.start, s.end) for s in sessions] == [(utc(9), utc(10))]


def test_naive_timestamps_are_read_as_utc():
    events = [
        ev("1", EventType.CHECK_IN, "2026-03-02 02:00:00"),
        ev("2", EventType.CHECK_OUT, "2026-03-02T03:30:00Z"),
    ]

    sessions = SessionReconstructor().reconstruct(events)

    assert sessions[0].start == utc(2)
    assert sessions[0].duration_millis == 90 * 60 * 1000


def test_reconstruction_is_idempotent():
    events = [
        ev("1", EventType.CHECK_IN, utc(1)),
        ev("2", EventType.CHECK_IN, utc(2)),
        ev("3", EventType.CHECK_OUT, utc(3)),
        ev("4", EventType.CHECK_OUT, utc(4)),
        ev("5", EventType.CHECK_IN, utc(6)),
    ]
    reconstructor = SessionReconstructor()

    assert reconstructor.reconstruct(events) == reconstructor.reconstruct(events)
    assert reconstructor.reconstruct(reversed(events)) == reconstructor.reconstruct(events)


def test_reconstruct_by_subject_separates_streams():
    events = [
        ev("1", EventType.CHECK_IN, utc(1), subject="a"),
        ev("2", EventType.CHECK_IN, utc(1), subject="b"),
        ev("3", EventType.CHECK_OUT, utc(2), subject="a"),
    ]

    by_subject = SessionReconstructor().reconstruct_by_subject(events)

    assert not by_subject["a"][0].is_open
    assert by_subject["b"][0].is_open


def test_open_session_agrees_with_status_resolver():
    scenarios = [
        [],
        [ev("1", EventType.CHECK_IN, utc(9))],
        [ev("1", EventType.CHECK_IN, utc(9)), ev("2", EventType.CHECK_OUT, utc(10))],
        [ev("1", EventType.CHECK_OUT, utc(9))],
        [ev("1", EventType.CHECK_IN, utc(9)), ev("2", EventType.CHECK_IN, utc(10))],
        [ev("1", EventType.CHECK_IN, utc(9)), ev("2", EventType.CHECK_OUT, utc(10)), ev("3", EventType.CHECK_OUT, utc(11))],
    ]
    reconstructor = SessionReconstructor()
    resolver = StatusResolver()

    for events in scenarios:
        has_open = reconstructor.open_session(events) is not None
        assert resolver.resolve(events).is_working == has_open
