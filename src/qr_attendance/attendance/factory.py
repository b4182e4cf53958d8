from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .model import AttendanceEntry
from .strategies.base import ScanStrategy
from .strategies.check_in_strategy import CheckInStrategy
from .strategies.check_out_strategy import CheckOutStrategy
from .strategies.completed_strategy import CompletedStrategy


@dataclass
class ScanStrategyFactory:
    """Factory Pattern: choose the strategy from today's entry."""

    def for_entry(self, existing: Optional[AttendanceEntry]) -> ScanStrategy:
        if existing is None:
            return CheckInStrategy()
        if existing.check_out_time is None:
            return CheckOutStrategy()
        return CompletedStrategy()
