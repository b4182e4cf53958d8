from __future__ import annotations

from flask import Flask, current_app, jsonify, request, session

from ..common.datetime_utils import format_time_of_day
from ..common.web import error_response, request_data, roles_required
from ..container import Container
from ..core.enums import RejectReason, Role
from ..people.controller import person_json
from ..scanning.image_source import ImageCodeSource, pyzbar_decode
from ..scanning.loop import ScanLoop
from .model import AttendanceEntry, ScanOutcome

_REJECT_STATUS = {
    RejectReason.UNKNOWN_IDENTITY: 404,
    RejectReason.ALREADY_COMPLETED: 409,
    RejectReason.MALFORMED_CODE: 400,
    RejectReason.EXPIRED_CODE: 400,
}


def entry_json(e: AttendanceEntry) -> dict:
    return {
        "id": e.entry_id,
        "studentId": e.person_id,
        "date": e.work_date.isoformat(),
        "checkInTime": format_time_of_day(e.check_in_time),
        "checkOutTime": format_time_of_day(e.check_out_time),
        "status": e.status.value,
    }


def outcome_response(outcome: ScanOutcome):
    body = {
        "success": outcome.accepted,
        "message": outcome.message,
        "action": outcome.action.value if outcome.action else None,
        "reason": outcome.reason.value if outcome.reason else None,
        "student": person_json(outcome.person) if outcome.person else None,
        "entry": entry_json(outcome.entry) if outcome.entry else None,
    }
    return jsonify(body), 200 if outcome.accepted else _REJECT_STATUS[outcome.reason]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/scan", methods=["POST"], endpoint="api_scan")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def api_scan():
        """Scanner operated by faculty: the code is a student's roll number."""

        code = str(request_data().get("code", "")).strip()
        if not code:
            return error_response("QR code must not be empty", 400)
        return outcome_response(container.matcher.record_scan(code))

    @app.route("/api/scan/self", methods=["POST"], endpoint="api_scan_self")
    @roles_required(Role.STUDENT)
    def api_scan_self():
        """Student self-scan: the code is the session code shown by faculty."""

        code = str(request_data().get("code", "")).strip()
        if not code:
            return error_response("QR code must not be empty", 400)
        return outcome_response(container.matcher.record_session_scan(session["natural_key"], code))

    @app.route("/api/scan/self/image", methods=["POST"], endpoint="api_scan_self_image")
    @roles_required(Role.STUDENT)
    def api_scan_self_image():
        """Student self-scan from an uploaded photo of the session code."""

        files = request.files.getlist("image")
        if not files:
            return error_response("Missing image file", 400)

        decoder = current_app.config.get("QR_DECODER") or pyzbar_decode
        source = ImageCodeSource([f.stream for f in files], decoder=decoder)
        outcome = ScanLoop(container.matcher, source).run(session["natural_key"])
        if outcome is None:
            return error_response("No QR code found in the image", 400)
        return outcome_response(outcome)

    @app.route("/api/attendance/history", endpoint="attendance_history")
    @roles_required(Role.STUDENT)
    def attendance_history():
        limit = int(current_app.config.get("HISTORY_LIMIT", 30))
        entries = container.attendance_repo.list_for_person(session["person_id"], limit=limit)
        return jsonify({"success": True, "entries": [entry_json(e) for e in entries]})
