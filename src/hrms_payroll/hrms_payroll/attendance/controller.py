from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_datetime
from ..common.http import domain_error_response, failure_response, invalid_action_response, json_body
from ..common.validators import require_enum, require_int
from ..container import Container
from ..core.enums import AttendanceStatus
from ..core.exceptions import DomainError, NotFoundError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance", methods=["POST"], endpoint="api_attendance_post")
    def api_attendance_post():
        data = json_body()
        action = data.get("action")
        if action not in {"checkin", "checkout", "mark"}:
            return invalid_action_response()

        try:
            user_id = require_int(data.get("userId"), "userId")
            now = parse_iso_datetime(data["timestamp"]) if data.get("timestamp") else None

            if action == "checkin":
                record = container.attendance_service.check_in(user_id, now=now, location=data.get("location"))
                return jsonify(record.to_dict()), 201
            if action == "checkout":
                record = container.attendance_service.check_out(user_id, now=now, location=data.get("location"))
                return jsonify(record.to_dict())

            record = container.attendance_service.mark(
                user_id,
                work_date=parse_iso_date(data.get("date") or data.get("timestamp")),
                status=require_enum(AttendanceStatus, data.get("status"), "Status"),
                remarks=data.get("remarks"),
            )
            return jsonify(record.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("record attendance")

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance_get")
    def api_attendance_get():
        """Either one day's record (``date``) or the monthly summary (``month``/``year``)."""
        try:
            user_id = require_int(request.args.get("userId"), "userId")

            if request.args.get("date"):
                record = container.attendance_service.get_for_date(user_id, parse_iso_date(request.args["date"]))
                if not record:
                    raise NotFoundError("No attendance record for this date")
                return jsonify(record.to_dict())

            today = now_local()
            month = require_int(request.args.get("month", today.month), "month")
            year = require_int(request.args.get("year", today.year), "year")
            summary = container.attendance_aggregator.monthly(user_id, month, year)
            return jsonify(summary.to_dict())
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch attendance")

    @app.route("/api/attendance/records", methods=["GET"], endpoint="api_attendance_records")
    def api_attendance_records():
        try:
            user_id = request.args.get("userId")
            if user_id:
                records = container.attendance_service.list_for_user(require_int(user_id, "userId"))
            else:
                records = container.attendance_service.list_all()
            return jsonify([r.to_dict() for r in records])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            return failure_response("fetch attendance records")
