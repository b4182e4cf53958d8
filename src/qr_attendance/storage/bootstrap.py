from __future__ import annotations

import logging
from datetime import date, datetime, time

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import format_time_of_day
from ..core.constants import ATTENDANCE_KEY, FACULTY_KEY, STUDENTS_KEY
from ..core.enums import AttendanceStatus
from .base import KeyValueStore, load_collection, save_collection

logger = logging.getLogger(__name__)

DEMO_STUDENTS = [
    ("1", "Rahul Sharma", "21CSE001", "2021", "B.Tech Computer Science", "Computer Science"),
    ("2", "Priya Patel", "21CSE002", "2021", "B.Tech Computer Science", "Computer Science"),
    ("3", "Amit Kumar", "22CSE001", "2022", "B.Tech Computer Science", "Computer Science"),
    ("4", "Sneha Reddy", "21IT001", "2021", "B.Tech Information Technology", "Information Technology"),
    ("5", "Vikash Singh", "21ME001", "2021", "B.Tech Mechanical", "Mechanical"),
]

DEMO_ATTENDANCE = [
    ("1", "1", time(9, 15, 30), time(16, 45, 20)),
    ("2", "2", time(9, 20, 15), None),
    ("3", "3", time(9, 30, 45), time(15, 30, 10)),
]


def ensure_demo_data(store: KeyValueStore, *, today: date, student_password: str) -> bool:
    """Seed sample students and today's sample ledger into an empty store.

    Each collection is only seeded when it is empty. Returns whether anything
    was written.
    """

    seeded = False
    with store.transaction():
        if not load_collection(store, STUDENTS_KEY):
            password_hash = generate_password_hash(student_password)
            created = datetime.now().isoformat()
            save_collection(
                store,
                STUDENTS_KEY,
                [
                    {
                        "id": sid,
                        "fullName": name,
                        "rollNumber": roll,
                        "email": f"{roll.lower()}@example.edu",
                        "year": year,
                        "course": course,
                        "department": dept,
                        "passwordHash": password_hash,
                        "createdAt": created,
                    }
                    for sid, name, roll, year, course, dept in DEMO_STUDENTS
                ],
            )
            seeded = True

        if not load_collection(store, ATTENDANCE_KEY):
            save_collection(
                store,
                ATTENDANCE_KEY,
                [
                    {
                        "id": rid,
                        "studentId": sid,
                        "date": today.isoformat(),
                        "checkInTime": format_time_of_day(check_in),
                        "checkOutTime": format_time_of_day(check_out),
                        "status": AttendanceStatus.PRESENT.value,
                    }
                    for rid, sid, check_in, check_out in DEMO_ATTENDANCE
                ],
            )
            seeded = True

    if seeded:
        logger.info("Demo data seeded for %s", today.isoformat())
    return seeded


def migrate_legacy_passwords(store: KeyValueStore) -> int:
    """Replace plain-text ``password`` fields with ``passwordHash``.

    Older demo documents stored secrets in clear. Returns the number of
    rows rewritten; collections without such rows are left untouched.
    """

    migrated = 0
    with store.transaction():
        for key in (STUDENTS_KEY, FACULTY_KEY):
            rows = load_collection(store, key)
            changed = False
            for row in rows:
                if "password" not in row:
                    continue
                plain = row.pop("password")
                if not row.get("passwordHash") and plain:
                    row["passwordHash"] = generate_password_hash(str(plain))
                changed = True
                migrated += 1
            if changed:
                save_collection(store, key, rows)

    if migrated:
        logger.info("Hashed %d legacy plain-text password(s)", migrated)
    return migrated
