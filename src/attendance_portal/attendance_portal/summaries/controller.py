from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_STATS_DAYS
from ..core.exceptions import NotFoundError, OperationTimeoutError, TransientStoreError, ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _required_field(data: dict, name: str) -> str:
    value = data.get(name)
    if not value:
        raise ValidationError(f"{name} is required")
    return str(value)


def register(app: Flask, container: Container) -> None:
    summaries = container.summary_service
    streaks = container.streak_service
    scheduler = container.scheduler

    # Failures must stay distinguishable from a genuine zero streak / 0%.
    @app.errorhandler(ValidationError)
    def handle_validation(e: ValidationError):
        return _error(str(e), 400)

    @app.errorhandler(NotFoundError)
    def handle_not_found(e: NotFoundError):
        return _error(str(e), 404)

    @app.errorhandler(TransientStoreError)
    def handle_store_error(e: TransientStoreError):
        logger.warning("Attendance store unavailable: %s", e)
        return _error("Attendance data is temporarily unavailable", 503)

    @app.errorhandler(OperationTimeoutError)
    def handle_timeout(e: OperationTimeoutError):
        return _error(str(e), 504)

    @app.route("/api/attendance/students/<int:student_id>/streak", methods=["GET"], endpoint="student_streak")
    def student_streak(student_id: int):
        streak = streaks.get_streak(student_id)
        return jsonify({"success": True, "data": {"streak": streak, "student_id": student_id}})

    @app.route("/api/attendance/students/<int:student_id>/daily-summary", methods=["GET"], endpoint="student_daily_summary")
    def student_daily_summary(student_id: int):
        raw_date = request.args.get("date")
        work_date = parse_iso_date(raw_date) if raw_date else None
        summary = summaries.calculate(student_id, work_date or summaries.today())
        return jsonify({"success": True, "data": {"summary": summary.to_dict(), "date": summary.work_date.isoformat()}})

    @app.route("/api/attendance/students/<int:student_id>/stats", methods=["GET"], endpoint="student_stats")
    def student_stats(student_id: int):
        days = request.args.get("days", DEFAULT_STATS_DAYS)
        stats = summaries.get_stats(student_id, days)
        streak = streaks.get_streak(student_id)
        data = stats.to_dict()
        data["current_streak"] = streak
        return jsonify({"success": True, "data": data})

    @app.route("/api/attendance/students/<int:student_id>/recalculate", methods=["POST"], endpoint="student_recalculate")
    def student_recalculate(student_id: int):
        body = _json_body()
        results = summaries.recalculate_range(
            student_id,
            _required_field(body, "start_date"),
            _required_field(body, "end_date"),
        )
        streak = streaks.get_streak(student_id)
        return jsonify({
            "success": True,
            "data": {
                "summaries": [s.to_dict() for s in results],
                "current_streak": streak,
                "message": f"Recalculated attendance for {len(results)} days",
            },
        })

    @app.route("/api/attendance/admin/recalculate/daily", methods=["POST"], endpoint="admin_recalculate_daily")
    def admin_recalculate_daily():
        job_id = scheduler.trigger_daily_calculation()
        return jsonify({"success": True, "data": {"job_id": job_id}}), 202

    @app.route("/api/attendance/admin/recalculate/range", methods=["POST"], endpoint="admin_recalculate_range")
    def admin_recalculate_range():
        body = _json_body()
        job_id = scheduler.trigger_date_range_calculation(
            _required_field(body, "start_date"),
            _required_field(body, "end_date"),
        )
        return jsonify({"success": True, "data": {"job_id": job_id}}), 202

    @app.route("/api/attendance/admin/recalculate/reports", methods=["GET"], endpoint="admin_recalculate_reports")
    def admin_recalculate_reports():
        return jsonify({"success": True, "data": [r.as_dict() for r in scheduler.last_reports]})
