from __future__ import annotations

from datetime import date, datetime

import pytest

from qr_attendance.reports.service import ReportService
from qr_attendance.storage.bootstrap import ensure_demo_data


@pytest.fixture
def seeded(store):
    ensure_demo_data(store, today=date(2026, 2, 2), student_password="password123")
    return store


@pytest.fixture
def reports(seeded, people_repo, attendance_repo):
    return ReportService(people_repo, attendance_repo)


def test_day_sheet_lists_every_student(reports):
    data = reports.day_sheet(work_date=date(2026, 2, 2))

    assert [r["roll_number"] for r in data.rows] == ["21CSE001", "21CSE002", "22CSE001", "21IT001", "21ME001"]
    assert data.rows[0]["check_in"] == "09:15:30"
    assert data.rows[1]["check_out"] is None
    assert data.rows[4]["status"] == "absent"
    assert data.summary["total_students"] == 5
    assert data.summary["present"] == 3
    assert data.summary["absent"] == 2
    assert data.summary["attendance_rate"] == 60


def test_day_sheet_filters(reports):
    assert [r["full_name"] for r in reports.day_sheet(work_date=date(2026, 2, 2), search="reddy").rows] == ["Sneha Reddy"]
    assert len(reports.day_sheet(work_date=date(2026, 2, 2), course="Computer Science").rows) == 3
    assert [r["roll_number"] for r in reports.day_sheet(work_date=date(2026, 2, 2), year="2022").rows] == ["22CSE001"]


def test_other_day_is_all_absent(reports):
    data = reports.day_sheet(work_date=date(2026, 2, 3))

    assert data.summary["present"] == 0
    assert {r["status"] for r in data.rows} == {"absent"}


def test_student_month(reports, matcher):
    matcher.record_scan("21CSE001", now=datetime(2026, 2, 3, 9, 0))
    matcher.record_scan("21CSE001", now=datetime(2026, 3, 1, 9, 0))

    data = reports.student_month(person_id="1", month="2026-02")

    assert [r["date"] for r in data.rows] == ["2026-02-03", "2026-02-02"]
    assert [r["duration"] for r in data.rows] == ["-", "7h 30m"]
    assert data.summary == {"month": "2026-02", "total_days": 2, "present_days": 2, "percentage": 100}


def test_student_month_without_entries(reports):
    assert reports.student_month(person_id="5", month="2026-02").summary["percentage"] == 0


def test_scanner_stats(reports):
    stats = reports.scanner_stats(today=date(2026, 2, 2))

    assert stats == {"total_students": 5, "present_today": 3, "scans_today": 5}
    assert reports.present_count(today=date(2026, 2, 2)) == 3


def test_student_month_durations(reports, matcher):
    matcher.record_scan("21CSE002", now=datetime(2026, 2, 3, 9, 20, 59))
    matcher.record_scan("21CSE002", now=datetime(2026, 2, 3, 17, 5, 0))
    matcher.record_scan("21CSE002", now=datetime(2026, 2, 4, 15, 0))
    matcher.record_scan("21CSE002", now=datetime(2026, 2, 4, 8, 0))

    rows = {r["date"]: r for r in reports.student_month(person_id="2", month="2026-02").rows}

    assert rows["2026-02-02"]["duration"] == "-"
    assert rows["2026-02-03"]["duration"] == "7h 45m"
    assert rows["2026-02-04"]["duration"] == "-7h 0m"
