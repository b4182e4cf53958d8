from __future__ import annotations

import csv
import io
from datetime import date

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .service import DAY_SHEET_FIELDS, ReportData


def _parse_date(value: str | None) -> date:
    if not value:
        return date.today()
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError("Date must be YYYY-MM-DD") from e


def register(app: Flask, container: Container) -> None:
    def _day_sheet() -> ReportData:
        return container.report_service.day_sheet(
            work_date=_parse_date(request.args.get("date")),
            search=request.args.get("search", ""),
            course=request.args.get("course", ""),
            year=request.args.get("year", ""),
        )

    @app.route("/api/reports/day", endpoint="report_day")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def report_day():
        data = _day_sheet()
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary})

    @app.route("/api/reports/day.csv", endpoint="report_day_csv")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def report_day_csv():
        data = _day_sheet()

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=DAY_SHEET_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow({k: ("" if v is None else v) for k, v in row.items()})

        filename = f"attendance_{data.summary['date'].replace('-', '')}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/me", endpoint="report_me")
    @roles_required(Role.STUDENT)
    def report_me():
        month = request.args.get("month") or date.today().strftime("%Y-%m")
        data = container.report_service.student_month(person_id=session["person_id"], month=month)
        return jsonify({"success": True, "rows": data.rows, "summary": data.summary})

    @app.route("/api/reports/scanner", endpoint="report_scanner")
    @roles_required(Role.FACULTY, Role.ADMIN)
    def report_scanner():
        stats = container.report_service.scanner_stats(today=date.today())
        return jsonify({"success": True, **stats})
