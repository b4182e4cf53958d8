from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus, RejectReason, ScanAction
from ..people.model import Person


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one person's attendance for one calendar day."""

    entry_id: str
    person_id: str
    work_date: date
    check_in_time: Optional[time]
    check_out_time: Optional[time]
    status: AttendanceStatus

    @property
    def is_completed(self) -> bool:
        return self.check_out_time is not None

    @property
    def scan_count(self) -> int:
        return int(self.check_in_time is not None) + int(self.check_out_time is not None)


@dataclass(frozen=True)
class ScanOutcome:
    """Result of one scan: accepted with an action, or rejected with a reason."""

    accepted: bool
    action: Optional[ScanAction] = None
    reason: Optional[RejectReason] = None
    person: Optional[Person] = None
    entry: Optional[AttendanceEntry] = None

    @classmethod
    def accept(cls, action: ScanAction, person: Person, entry: AttendanceEntry) -> "ScanOutcome":
        return cls(accepted=True, action=action, person=person, entry=entry)

    @classmethod
    def reject(cls, reason: RejectReason, person: Optional[Person] = None) -> "ScanOutcome":
        return cls(accepted=False, reason=reason, person=person)

    @property
    def message(self) -> str:
        name = self.person.display_name if self.person else None
        if self.accepted:
            label = "Check-in" if self.action == ScanAction.CHECK_IN else "Check-out"
            return f"{label} successful for {name}"
        return {
            RejectReason.UNKNOWN_IDENTITY: "Student not found! Please check the QR code.",
            RejectReason.ALREADY_COMPLETED: f"{name} has already checked out today.",
            RejectReason.MALFORMED_CODE: "Invalid QR code. Please try again.",
            RejectReason.EXPIRED_CODE: "Expired QR code. Please scan the current code.",
        }[self.reason]
