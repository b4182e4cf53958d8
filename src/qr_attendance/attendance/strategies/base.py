from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...core.enums import AttendanceStatus, RejectReason, ScanAction
from ..model import AttendanceEntry


@dataclass(frozen=True)
class ScanDecision:
    action: Optional[ScanAction] = None
    reason: Optional[RejectReason] = None
    status: AttendanceStatus = AttendanceStatus.PRESENT


class ScanStrategy(ABC):
    """Strategy Pattern: decide what a scan does to today's entry."""

    @abstractmethod
    def decide(self, *, existing: Optional[AttendanceEntry], now: datetime) -> ScanDecision:
        raise NotImplementedError
