from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Who is logged in; drives route permissions."""

    STUDENT = "student"
    FACULTY = "faculty"
    ADMIN = "admin"


class PersonCategory(str, Enum):
    STUDENT = "student"
    FACULTY = "faculty"


class AttendanceStatus(str, Enum):
    """Stored status of a ledger entry."""

    PRESENT = "present"
    ABSENT = "absent"


class ScanAction(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"


class RejectReason(str, Enum):
    """Why a scan did not change the ledger."""

    UNKNOWN_IDENTITY = "UNKNOWN_IDENTITY"
    ALREADY_COMPLETED = "ALREADY_COMPLETED"
    MALFORMED_CODE = "MALFORMED_CODE"
    EXPIRED_CODE = "EXPIRED_CODE"
