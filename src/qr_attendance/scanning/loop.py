from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from ..attendance.matcher import SessionMatcher
from ..attendance.model import ScanOutcome
from ..common.datetime_utils import now_local
from ..core.enums import RejectReason
from .source import CodeSource

_RETRYABLE = {RejectReason.MALFORMED_CODE, RejectReason.EXPIRED_CODE}


class ScanLoop:
    """Feeds a person's scanned session codes to the matcher.

    Bad or stale codes are skipped; the loop ends on the first outcome that
    is not about the code itself, and always closes the source.
    """

    def __init__(self, matcher: SessionMatcher, source: CodeSource, *, clock: Callable[[], datetime] = now_local):
        self._matcher = matcher
        self._source = source
        self._clock = clock

    def run(self, natural_key: str) -> Optional[ScanOutcome]:
        last: Optional[ScanOutcome] = None
        try:
            for code in self._source.codes():
                last = self._matcher.record_session_scan(natural_key, code, now=self._clock())
                if last.accepted or last.reason not in _RETRYABLE:
                    return last
            return last
        finally:
            self._source.close()
