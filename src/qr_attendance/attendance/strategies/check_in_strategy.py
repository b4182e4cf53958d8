from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus, ScanAction
from ..model import AttendanceEntry
from .base import ScanDecision, ScanStrategy


class CheckInStrategy(ScanStrategy):
    """First scan of the day."""

    def decide(self, *, existing: Optional[AttendanceEntry], now: datetime) -> ScanDecision:
        return ScanDecision(action=ScanAction.CHECK_IN, status=AttendanceStatus.PRESENT)
