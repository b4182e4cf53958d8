from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..attendance.model import AttendanceEntry
from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_time_of_day
from ..core.enums import AttendanceStatus, PersonCategory
from ..people.model import Person
from ..people.repository import PersonRepository

DAY_SHEET_FIELDS = [
    "date",
    "student_id",
    "full_name",
    "roll_number",
    "course",
    "year",
    "check_in",
    "check_out",
    "status",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: dict


def _percentage(part: int, whole: int) -> int:
    return round(part * 100 / whole) if whole else 0


def _duration(check_in: Optional[time], check_out: Optional[time]) -> str:
    """Whole minutes between the two times as ``"{h}h {m}m"``; ``-`` if either is missing.

    Seconds are ignored. A check-out before the check-in gives a negative
    duration such as ``"-7h 0m"``.
    """
    if check_in is None or check_out is None:
        return "-"
    diff = (check_out.hour * 60 + check_out.minute) - (check_in.hour * 60 + check_in.minute)
    hours, minutes = divmod(abs(diff), 60)
    sign = "-" if diff < 0 else ""
    return f"{sign}{hours}h {minutes}m"


class ReportService:
    def __init__(self, people: PersonRepository, attendance: AttendanceRepository):
        self._people = people
        self._attendance = attendance

    def _row(self, person: Person, work_date: date, entry: Optional[AttendanceEntry]) -> dict:
        return {
            "date": work_date.isoformat(),
            "student_id": person.person_id,
            "full_name": person.display_name,
            "roll_number": person.natural_key,
            "course": person.course or "-",
            "year": person.year or "-",
            "check_in": format_time_of_day(entry.check_in_time) if entry else None,
            "check_out": format_time_of_day(entry.check_out_time) if entry else None,
            "status": entry.status.value if entry else AttendanceStatus.ABSENT.value,
        }

    def day_sheet(self, *, work_date: date, search: str = "", course: str = "", year: str = "") -> ReportData:
        """Every student for a date with their entry, plus totals for that date."""

        students = self._people.list_by_category(PersonCategory.STUDENT)
        entries = {e.person_id: e for e in self._attendance.list_for_date(work_date)}

        term = (search or "").strip().lower()
        rows: list[dict] = []
        for s in students:
            if term and term not in s.display_name.lower() and term not in s.natural_key.lower():
                continue
            if course and course not in (s.course or ""):
                continue
            if year and s.year != year:
                continue
            rows.append(self._row(s, work_date, entries.get(s.person_id)))

        present = sum(1 for e in entries.values() if e.status == AttendanceStatus.PRESENT)
        return ReportData(
            rows=rows,
            summary={
                "date": work_date.isoformat(),
                "total_students": len(students),
                "present": present,
                "absent": max(len(students) - present, 0),
                "attendance_rate": _percentage(present, len(students)),
                "courses": sorted({s.course for s in students if s.course}),
                "years": sorted({s.year for s in students if s.year}),
            },
        )

    def student_month(self, *, person_id: str, month: str) -> ReportData:
        """Entries of one person whose date starts with ``YYYY-MM``."""

        entries = [e for e in self._attendance.list_for_person(person_id) if e.work_date.isoformat().startswith(month)]
        present = sum(1 for e in entries if e.status == AttendanceStatus.PRESENT)
        rows = [
            {
                "date": e.work_date.isoformat(),
                "check_in": format_time_of_day(e.check_in_time),
                "check_out": format_time_of_day(e.check_out_time),
                "duration": _duration(e.check_in_time, e.check_out_time),
                "status": e.status.value,
            }
            for e in entries
        ]
        return ReportData(
            rows=rows,
            summary={
                "month": month,
                "total_days": len(entries),
                "present_days": present,
                "percentage": _percentage(present, len(entries)),
            },
        )

    def scanner_stats(self, *, today: date) -> dict:
        todays = self._attendance.list_for_date(today)
        return {
            "total_students": len(self._people.list_by_category(PersonCategory.STUDENT)),
            "present_today": len(todays),
            "scans_today": sum(e.scan_count for e in todays),
        }

    def present_count(self, *, today: date) -> int:
        return sum(1 for e in self._attendance.list_for_date(today) if e.status == AttendanceStatus.PRESENT)
