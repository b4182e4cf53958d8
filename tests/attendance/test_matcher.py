from __future__ import annotations

from datetime import datetime, time

from qr_attendance.attendance.matcher import SessionMatcher
from qr_attendance.attendance.store_attendance_repository import StoreAttendanceRepository
from qr_attendance.common.datetime_utils import to_epoch_millis
from qr_attendance.core.constants import ATTENDANCE_KEY
from qr_attendance.core.enums import AttendanceStatus, PersonCategory, RejectReason, ScanAction
from qr_attendance.people.store_person_repository import StorePersonRepository
from qr_attendance.reports.service import ReportService
from qr_attendance.sessions import codes
from qr_attendance.storage.memory_store import InMemoryStore


def test_unknown_identity_is_rejected_and_ledger_unchanged(matcher, store, student, fixed_now):
    outcome = matcher.record_scan("99XYZ999", now=fixed_now)

    assert not outcome.accepted
    assert outcome.reason == RejectReason.UNKNOWN_IDENTITY
    assert store.get(ATTENDANCE_KEY) is None


def test_first_scan_checks_in(matcher, attendance_repo, student, fixed_now):
    outcome = matcher.record_scan("21CSE001", now=fixed_now)

    assert outcome.accepted
    assert outcome.action == ScanAction.CHECK_IN
    assert outcome.person.person_id == student.person_id

    entry = attendance_repo.get_for_person_and_date(student.person_id, fixed_now.date())
    assert entry.check_in_time == time(9, 15, 30)
    assert entry.check_out_time is None
    assert entry.status == AttendanceStatus.PRESENT


def test_lookup_is_case_insensitive(matcher, student, fixed_now):
    outcome = matcher.record_scan("21cse001", now=fixed_now)

    assert outcome.accepted
    assert outcome.person.natural_key == "21CSE001"


def test_person_id_is_accepted_as_identifier(matcher, student, fixed_now):
    outcome = matcher.record_scan(student.person_id, now=fixed_now)

    assert outcome.accepted


def test_full_day_scenario(matcher, attendance_repo, store, student):
    day = datetime(2026, 2, 2)

    first = matcher.record_scan("21CSE001", now=day.replace(hour=9, minute=15, second=30))
    second = matcher.record_scan("21CSE001", now=day.replace(hour=16, minute=45, second=20))

    assert first.action == ScanAction.CHECK_IN
    assert second.action == ScanAction.CHECK_OUT
    assert second.entry.check_in_time == time(9, 15, 30)
    assert second.entry.check_out_time == time(16, 45, 20)

    rows_before = store.get(ATTENDANCE_KEY)
    third = matcher.record_scan("21CSE001", now=day.replace(hour=17))

    assert not third.accepted
    assert third.reason == RejectReason.ALREADY_COMPLETED
    assert third.person.person_id == student.person_id
    assert store.get(ATTENDANCE_KEY) == rows_before
    assert rows_before == [
        {
            "id": first.entry.entry_id,
            "studentId": student.person_id,
            "date": "2026-02-02",
            "checkInTime": "09:15:30",
            "checkOutTime": "16:45:20",
            "status": "present",
        }
    ]


def test_new_day_starts_a_new_entry(matcher, attendance_repo, student):
    matcher.record_scan("21CSE001", now=datetime(2026, 2, 2, 9, 0))
    matcher.record_scan("21CSE001", now=datetime(2026, 2, 2, 16, 0))

    outcome = matcher.record_scan("21CSE001", now=datetime(2026, 2, 3, 9, 0))

    assert outcome.action == ScanAction.CHECK_IN
    assert len(attendance_repo.list_for_person(student.person_id)) == 2


def test_checkout_earlier_than_checkin_is_kept_as_is(matcher, student):
    matcher.record_scan("21CSE001", now=datetime(2026, 2, 2, 15, 0))

    outcome = matcher.record_scan("21CSE001", now=datetime(2026, 2, 2, 8, 0))

    assert outcome.action == ScanAction.CHECK_OUT
    assert outcome.entry.check_out_time == time(8, 0)


def test_session_scan_rejects_malformed_code(matcher, store, student, fixed_now):
    outcome = matcher.record_session_scan("21CSE001", "GARBAGE", now=fixed_now)

    assert outcome.reason == RejectReason.MALFORMED_CODE
    assert store.get(ATTENDANCE_KEY) is None


def test_session_scan_rejects_expired_code(matcher, student, fixed_now):
    stale = codes.generate(to_epoch_millis(fixed_now) - 15_001).value

    outcome = matcher.record_session_scan("21CSE001", stale, now=fixed_now)

    assert outcome.reason == RejectReason.EXPIRED_CODE


def test_session_scan_with_fresh_code_checks_in(matcher, student, fixed_now):
    fresh = codes.generate(to_epoch_millis(fixed_now) - 5_000).value

    outcome = matcher.record_session_scan("21CSE001", fresh, now=fixed_now)

    assert outcome.accepted
    assert outcome.action == ScanAction.CHECK_IN


def test_faculty_cannot_be_checked_in(matcher, people_repo, attendance_repo, store, student, fixed_now):
    faculty_id = people_repo.create_person(
        display_name="Dr. Meera Iyer",
        natural_key="FAC001",
        category=PersonCategory.FACULTY,
        email="meera@example.edu",
        password_hash=None,
        department="Computer Science",
    )

    by_key = matcher.record_scan("FAC001", now=fixed_now)
    by_id = matcher.record_scan(faculty_id, now=fixed_now)

    assert by_key.reason == RejectReason.UNKNOWN_IDENTITY
    assert by_id.reason == RejectReason.UNKNOWN_IDENTITY
    assert store.get(ATTENDANCE_KEY) is None

    reports = ReportService(people_repo, attendance_repo)
    assert reports.scanner_stats(today=fixed_now.date()) == {"total_students": 1, "present_today": 0, "scans_today": 0}
    assert reports.day_sheet(work_date=fixed_now.date()).summary["attendance_rate"] == 0


class CountingStore(InMemoryStore):
    def __init__(self):
        super().__init__()
        self.flushes = 0

    def _flush(self):
        self.flushes += 1


def test_only_accepted_scans_are_flushed(fixed_now):
    store = CountingStore()
    people = StorePersonRepository(store)
    people.create_person(
        display_name="Rahul Sharma",
        natural_key="21CSE001",
        category=PersonCategory.STUDENT,
        email="rahul@example.edu",
        password_hash=None,
    )
    matcher = SessionMatcher(StoreAttendanceRepository(store), people)
    store.flushes = 0

    matcher.record_scan("99XYZ999", now=fixed_now)
    matcher.record_session_scan("21CSE001", "GARBAGE", now=fixed_now)
    assert store.flushes == 0

    matcher.record_scan("21CSE001", now=fixed_now)
    matcher.record_scan("21CSE001", now=fixed_now.replace(hour=17))
    assert store.flushes == 2

    matcher.record_scan("21CSE001", now=fixed_now.replace(hour=18))
    assert store.flushes == 2
