from __future__ import annotations

import csv
import io
from datetime import tzinfo
from typing import Iterable, Sequence

from ..core.constants import EXPORT_COLUMNS
from ..events.model import AttendanceEvent
from ..subjects.repository import SubjectDirectory


class AttendanceExportService:
    """Flattens events into the export table.

    Column order is a compatibility contract: Name, Email, Date, Time, Type,
    Address, Platform. Date/Time are rendered in the reference timezone.
    """

    def __init__(self, subjects: SubjectDirectory, *, tz: tzinfo):
        self._subjects = subjects
        self._tz = tz

    def build_rows(self, events: Iterable[AttendanceEvent]) -> list[dict]:
        emails: dict[str, str] = {}
        rows = []
        for e in sorted(events, key=_newest_first_key, reverse=True):
            if e.subject_key not in emails:
                emails[e.subject_key] = self._email_for(e.subject_key)

            if e.timestamp is not None:
                local = e.timestamp.astimezone(self._tz)
                day, clock_time = local.strftime("%Y-%m-%d"), local.strftime("%H:%M:%S")
            else:
                day, clock_time = e.raw_time, ""

            rows.append(
                {
                    "Name": e.subject_display_name,
                    "Email": emails[e.subject_key],
                    "Date": day,
                    "Time": clock_time,
                    "Type": e.event_type.label,
                    "Address": e.address or "",
                    "Platform": e.platform,
                }
            )
        return rows

    def to_csv(self, rows: Sequence[dict]) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=list(EXPORT_COLUMNS))
        writer.writeheader()
        for row in rows:
            writer.writerow(row)
        return out.getvalue().encode("utf-8-sig")

    def _email_for(self, subject_key: str) -> str:
        subject = self._subjects.get(subject_key)
        if subject:
            return subject.email or ""
        proxy = self._subjects.get_proxy(subject_key)
        if proxy:
            delegating = self._subjects.get(proxy.delegating_subject_id)
            return (delegating.email or "") if delegating else ""
        return ""


def _newest_first_key(e: AttendanceEvent) -> tuple[int, float, str]:
    # Unparseable times sort after every valid one.
    if e.timestamp is None:
        return (0, 0.0, e.event_id)
    return (1, e.timestamp.timestamp(), e.event_id)
