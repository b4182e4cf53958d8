from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import RejectReason
from ..model import AttendanceEntry
from .base import ScanDecision, ScanStrategy


class CompletedStrategy(ScanStrategy):
    """Both times already set: the scan is a duplicate."""

    def decide(self, *, existing: Optional[AttendanceEntry], now: datetime) -> ScanDecision:
        return ScanDecision(reason=RejectReason.ALREADY_COMPLETED, status=existing.status)
