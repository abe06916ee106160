from __future__ import annotations

import logging
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_coordinate
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, EventStoreError, ValidationError
from ..daily.model import DailyRecord
from ..events.model import AttendanceEvent, Location
from ..presence.model import MonthlyPresenceSummary
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    def json_errors(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return jsonify({"success": False, "message": str(e)}), 400
            except AuthorizationError as e:
                return jsonify({"success": False, "message": str(e)}), 403
            except EventStoreError as e:
                logger.warning("Attendance store unavailable: %s", e)
                return jsonify({"success": False, "message": "Attendance data is temporarily unavailable"}), 503

        return wrapper

    def _payload() -> dict:
        return request.get_json(silent=True) or {}

    def _location(data: dict) -> Location:
        return Location(
            lat=optional_coordinate(data.get("lat"), "lat", limit=90),
            lng=optional_coordinate(data.get("lng"), "lng", limit=180),
            address=(data.get("address") or None),
        )

    def _device(data: dict) -> dict:
        device = data.get("device")
        return device if isinstance(device, dict) else {}

    def _int_arg(name: str, default: int) -> int:
        value = request.args.get(name)
        if value in (None, ""):
            return default
        try:
            return int(value)
        except ValueError:
            raise ValidationError(f"{name} must be a number")

    def _current_role() -> Role | None:
        try:
            return Role(session.get("role"))
        except ValueError:
            return None

    def _event_json(e: AttendanceEvent | None) -> dict | None:
        if e is None:
            return None
        return {
            "id": e.event_id,
            "subject_key": e.subject_key,
            "name": e.subject_display_name,
            "type": e.event_type.value,
            "time": e.timestamp.isoformat() if e.timestamp else e.raw_time,
            "lat": e.lat,
            "lng": e.lng,
            "address": e.address,
            "platform": e.platform,
            "delegated_by": e.delegated_by,
        }

    def _daily_json(r: DailyRecord) -> dict:
        return {
            "subject_key": r.subject_key,
            "date": r.calendar_date.isoformat(),
            "sessions": [
                {"start": s.start.isoformat(), "end": s.end.isoformat() if s.end else None} for s in r.sessions
            ],
            "total_duration_millis": r.total_duration_millis,
            "total": r.total_display,
            "is_active_now": r.is_active_now,
            "is_late_login": r.is_late_login,
            "is_early_logout": r.is_early_logout,
        }

    def _summary_json(s: MonthlyPresenceSummary) -> dict:
        return {
            "subject_key": s.subject_key,
            "present_days": s.present_days,
            "total_days_in_month": s.total_days_in_month,
            "percentage": s.percentage,
            "level": s.level.value,
            "present_dates": sorted(d.isoformat() for d in s.present_dates),
        }

    def _year_month() -> tuple[int, int]:
        today = container.attendance_service.today()
        return _int_arg("year", today.year), _int_arg("month", today.month)

    @app.route("/api/subjects/<subject_key>/status", methods=["GET"], endpoint="subject_status")
    @json_errors
    def subject_status(subject_key: str):
        st = container.attendance_service.current_status(subject_key)
        return jsonify({"status": st.status.value, "latest": _event_json(st.latest_event)})

    @app.route("/api/subjects/<subject_key>/history", methods=["GET"], endpoint="subject_history")
    @json_errors
    def subject_history(subject_key: str):
        limit = _int_arg("limit", DEFAULT_HISTORY_LIMIT)
        return jsonify({"rows": container.attendance_service.history_ui(subject_key, limit=limit)})

    @app.route("/api/subjects/<subject_key>/daily", methods=["GET"], endpoint="subject_daily")
    @json_errors
    def subject_daily(subject_key: str):
        raw = request.args.get("date")
        try:
            target = parse_iso_date(raw) if raw else None
        except ValueError:
            raise ValidationError("date must be YYYY-MM-DD")
        return jsonify(_daily_json(container.attendance_service.daily_record(subject_key, target)))

    @app.route("/api/subjects/<subject_key>/monthly", methods=["GET"], endpoint="subject_monthly")
    @json_errors
    def subject_monthly(subject_key: str):
        year, month = _year_month()
        return jsonify(_summary_json(container.attendance_service.monthly_summary(subject_key, year, month)))

    @app.route("/api/subjects/<subject_key>/workers", methods=["GET"], endpoint="subject_workers")
    @json_errors
    def subject_workers(subject_key: str):
        proxies = container.subjects_repo.list_proxies(subject_key)
        return jsonify({"rows": [{"id": p.proxy_subject_id, "label": p.label} for p in proxies]})

    @app.route("/api/attendance/<event_type>", methods=["POST"], endpoint="record_event")
    @json_errors
    def record_event(event_type: str):
        data = _payload()
        event = container.recording_service.record(
            data.get("subject_key", ""),
            event_type,
            location=_location(data),
            device=_device(data),
        )
        return jsonify({"success": True, "event": _event_json(event)}), 201

    @app.route("/api/attendance/<event_type>/bulk", methods=["POST"], endpoint="record_bulk")
    @json_errors
    def record_bulk(event_type: str):
        data = _payload()
        events = container.recording_service.record_bulk(
            data.get("actor_key", ""),
            event_type,
            list(data.get("subject_keys") or []),
            location=_location(data),
            device=_device(data),
        )
        return jsonify({"success": True, "count": len(events), "events": [_event_json(e) for e in events]}), 201

    @app.route("/api/attendance/<event_type>/workers", methods=["POST"], endpoint="record_workers")
    @json_errors
    def record_workers(event_type: str):
        data = _payload()
        events = container.recording_service.record_for_proxies(
            data.get("delegating_key", ""),
            event_type,
            list(data.get("proxy_ids") or []),
            location=_location(data),
            device=_device(data),
        )
        return jsonify({"success": True, "count": len(events), "events": [_event_json(e) for e in events]}), 201

    @app.route("/api/team", methods=["GET"], endpoint="team_overview")
    @json_errors
    def team_overview():
        overview = container.attendance_service.team_overview(leader_key=request.args.get("leader") or None)
        return jsonify(
            {
                "working_count": overview.working_count,
                "total": overview.total,
                "rows": [
                    {
                        "subject_key": r.subject.subject_key,
                        "name": r.subject.display_name,
                        "email": r.subject.email,
                        "status": r.status.status.value,
                        "latest": _event_json(r.status.latest_event),
                    }
                    for r in overview.rows
                ],
            }
        )

    @app.route("/api/presence", methods=["GET"], endpoint="presence_grid")
    @json_errors
    def presence_grid():
        year, month = _year_month()
        grid = container.attendance_service.presence_grid(year, month, leader_key=request.args.get("leader") or None)
        return jsonify(
            {
                "year": grid.year,
                "month": grid.month,
                "days": [d.day for d in grid.dates],
                "rows": [
                    {
                        "name": row.subject.display_name,
                        "email": row.subject.email,
                        "summary": _summary_json(row.summary),
                        "cells": [{"kind": c.kind.value, "is_today": c.is_today} for c in row.cells],
                    }
                    for row in grid.rows
                ],
            }
        )

    @app.route("/api/export.csv", methods=["GET"], endpoint="export_csv")
    @json_errors
    def export_csv():
        subject_key = request.args.get("subject")
        events = (
            container.events_repo.list_for_subject(subject_key) if subject_key else container.events_repo.list_all()
        )
        svc = container.export_service
        csv_bytes = svc.to_csv(svc.build_rows(events))
        filename = f"attendance_{container.clock.now().astimezone(container.tz).strftime('%Y%m%d_%H%M%S')}.csv"
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/policy", methods=["GET"], endpoint="policy_get")
    @json_errors
    def policy_get():
        cfg = container.policy_service.current()
        return jsonify({"work_start": cfg.work_start.strftime("%H:%M"), "work_end": cfg.work_end.strftime("%H:%M")})

    @app.route("/api/policy", methods=["PUT"], endpoint="policy_update")
    @json_errors
    def policy_update():
        data = _payload()
        cfg = container.policy_service.update(
            current_role=_current_role(),
            work_start=data.get("work_start", ""),
            work_end=data.get("work_end", ""),
        )
        return jsonify(
            {"success": True, "work_start": cfg.work_start.strftime("%H:%M"), "work_end": cfg.work_end.strftime("%H:%M")}
        )
