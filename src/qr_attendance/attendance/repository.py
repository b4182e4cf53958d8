from __future__ import annotations

from datetime import date, time
from typing import ContextManager, Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry


class AttendanceRepository(Protocol):
    def transaction(self) -> ContextManager[None]:
        """Hold the ledger for a read-modify-write sequence."""

        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def list_for_date(self, work_date: date) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def list_for_person(self, person_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceEntry]:
        raise NotImplementedError

    def get_for_person_and_date(self, person_id: str, work_date: date) -> Optional[AttendanceEntry]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        person_id: str,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        entry_id: Optional[str] = None,
    ) -> AttendanceEntry:
        raise NotImplementedError

    def update_checkout(self, *, entry_id: str, check_out_time: time) -> Optional[AttendanceEntry]:
        raise NotImplementedError
