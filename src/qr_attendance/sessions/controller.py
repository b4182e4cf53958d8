from __future__ import annotations

import io
from datetime import date

from flask import Flask, jsonify, send_file

from ..common.web import error_response, roles_required
from ..container import Container
from ..core.enums import Role
from .qr_image import render_png


def register(app: Flask, container: Container) -> None:
    rotator = container.rotator

    def _state() -> dict:
        code = rotator.current()
        return {
            "success": True,
            "running": rotator.is_running,
            "paused": rotator.is_paused,
            "code": code.value if code else None,
            "secondsRemaining": rotator.seconds_remaining(),
            "windowMs": rotator.window_ms,
            "presentToday": container.report_service.present_count(today=date.today()),
        }

    @app.route("/api/session/start", methods=["POST"], endpoint="session_start")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_start():
        rotator.start()
        return jsonify(_state())

    @app.route("/api/session/stop", methods=["POST"], endpoint="session_stop")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_stop():
        rotator.stop()
        return jsonify(_state())

    @app.route("/api/session/pause", methods=["POST"], endpoint="session_pause")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_pause():
        rotator.pause()
        return jsonify(_state())

    @app.route("/api/session/resume", methods=["POST"], endpoint="session_resume")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_resume():
        if not rotator.is_running:
            return error_response("Session is not running", 409)
        rotator.resume()
        return jsonify(_state())

    @app.route("/api/session/code", endpoint="session_code")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_code():
        return jsonify(_state())

    @app.route("/api/session/code.png", endpoint="session_code_image")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def session_code_image():
        code = rotator.current()
        if code is None:
            return error_response("Session is paused or not started", 409)
        return send_file(io.BytesIO(render_png(code.value)), mimetype="image/png")
