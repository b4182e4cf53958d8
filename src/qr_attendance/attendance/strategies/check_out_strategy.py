from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import ScanAction
from ..model import AttendanceEntry
from .base import ScanDecision, ScanStrategy


class CheckOutStrategy(ScanStrategy):
    """Second scan of the day; status stays what check-in recorded.

    No ordering check against the check-in time.
    """

    def decide(self, *, existing: Optional[AttendanceEntry], now: datetime) -> ScanDecision:
        return ScanDecision(action=ScanAction.CHECK_OUT, status=existing.status)
