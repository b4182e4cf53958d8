from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import date, time
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import format_time_of_day, parse_iso_date, parse_time_of_day
from ..core.constants import ATTENDANCE_KEY
from ..core.enums import AttendanceStatus
from ..core.exceptions import CorruptStoreError
from ..storage.base import KeyValueStore, load_collection, save_collection
from .model import AttendanceEntry
from .repository import AttendanceRepository


def _to_entry(row: Dict[str, Any]) -> AttendanceEntry:
    try:
        return AttendanceEntry(
            entry_id=str(row["id"]),
            person_id=str(row["studentId"]),
            work_date=parse_iso_date(row["date"]),
            check_in_time=parse_time_of_day(row.get("checkInTime")),
            check_out_time=parse_time_of_day(row.get("checkOutTime")),
            status=AttendanceStatus(row.get("status", AttendanceStatus.PRESENT.value)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise CorruptStoreError(f"Malformed attendance record: {row!r}") from e


def _to_row(entry: AttendanceEntry) -> Dict[str, Any]:
    return {
        "id": entry.entry_id,
        "studentId": entry.person_id,
        "date": entry.work_date.isoformat(),
        "checkInTime": format_time_of_day(entry.check_in_time),
        "checkOutTime": format_time_of_day(entry.check_out_time),
        "status": entry.status.value,
    }


class StoreAttendanceRepository(AttendanceRepository):
    """Ledger kept as one flat list; every change rewrites the whole list."""

    def __init__(self, store: KeyValueStore):
        self._store = store

    def transaction(self):
        return self._store.transaction()

    def list_all(self) -> Sequence[AttendanceEntry]:
        return [_to_entry(r) for r in load_collection(self._store, ATTENDANCE_KEY)]

    def _save_all(self, entries: Sequence[AttendanceEntry]) -> None:
        save_collection(self._store, ATTENDANCE_KEY, [_to_row(e) for e in entries])

    def list_for_date(self, work_date: date) -> Sequence[AttendanceEntry]:
        return [e for e in self.list_all() if e.work_date == work_date]

    def list_for_person(self, person_id: str, *, limit: Optional[int] = None) -> Sequence[AttendanceEntry]:
        items = [e for e in self.list_all() if e.person_id == person_id]
        items.sort(key=lambda e: e.work_date, reverse=True)
        return items[:limit] if limit is not None else items

    def get_for_person_and_date(self, person_id: str, work_date: date) -> Optional[AttendanceEntry]:
        for e in self.list_all():
            if e.person_id == person_id and e.work_date == work_date:
                return e
        return None

    def create_checkin(
        self,
        *,
        person_id: str,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        entry_id: Optional[str] = None,
    ) -> AttendanceEntry:
        entry = AttendanceEntry(
            entry_id=entry_id or uuid.uuid4().hex,
            person_id=person_id,
            work_date=work_date,
            check_in_time=check_in_time,
            check_out_time=None,
            status=status,
        )
        with self._store.transaction():
            entries = list(self.list_all())
            entries.append(entry)
            self._save_all(entries)
        return entry

    def update_checkout(self, *, entry_id: str, check_out_time: time) -> Optional[AttendanceEntry]:
        with self._store.transaction():
            entries = list(self.list_all())
            for i, e in enumerate(entries):
                if e.entry_id == entry_id:
                    entries[i] = replace(e, check_out_time=check_out_time)
                    self._save_all(entries)
                    return entries[i]
        return None
