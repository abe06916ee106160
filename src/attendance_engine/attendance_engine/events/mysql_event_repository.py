from __future__ import annotations

import json
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, load_json_column
from .model import AttendanceEvent
from .repository import EventStore

_COLUMNS = "event_id, subject_key, subject_display_name, event_type, event_time, lat, lng, address, device, delegated_by"


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent.create(
        event_id=r["event_id"],
        subject_key=r["subject_key"],
        subject_display_name=r.get("subject_display_name") or r["subject_key"],
        event_type=r["event_type"],
        time=r["event_time"],
        lat=float(r["lat"]) if r.get("lat") is not None else None,
        lng=float(r["lng"]) if r.get("lng") is not None else None,
        address=r.get("address"),
        device=load_json_column(r.get("device")),
        delegated_by=r.get("delegated_by"),
    )


def _event_params(e: AttendanceEvent) -> tuple:
    return (
        e.event_id,
        e.subject_key,
        e.subject_display_name,
        e.event_type.value,
        e.raw_time,
        e.lat,
        e.lng,
        e.address,
        json.dumps(dict(e.device)),
        e.delegated_by,
    )


class MySQLEventStore(EventStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_subject(self, subject_key: str) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE subject_key=%s
                """,
                (subject_key,),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def list_all(self) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_events")
            return [_row_to_event(r) for r in fetchall(cur)]

    def append(self, event: AttendanceEvent) -> None:
        self.append_many([event])

    def append_many(self, events: Sequence[AttendanceEvent]) -> None:
        if not events:
            return
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"""
                INSERT INTO attendance_events({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                [_event_params(e) for e in events],
            )
