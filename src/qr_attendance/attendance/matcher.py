from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, to_epoch_millis
from ..core.constants import DEFAULT_CODE_WINDOW_MS, SESSION_CODE_PREFIX
from ..core.enums import PersonCategory, RejectReason, ScanAction
from ..core.exceptions import ExpiredCodeError, MalformedCodeError
from ..people.model import Person
from ..people.repository import PersonRepository
from ..sessions import codes
from .factory import ScanStrategyFactory
from .model import ScanOutcome
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class SessionMatcher:
    """Turns a scanned identifier into a check-in, a check-out or a rejection.

    The lookup, the decision and the ledger write happen inside one ledger
    transaction, so two scans for the same person cannot interleave.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        people: PersonRepository,
        *,
        strategy_factory: Optional[ScanStrategyFactory] = None,
        code_window_ms: int = DEFAULT_CODE_WINDOW_MS,
        code_prefix: str = SESSION_CODE_PREFIX,
    ):
        self._attendance = attendance
        self._people = people
        self._factory = strategy_factory or ScanStrategyFactory()
        self._code_window_ms = int(code_window_ms)
        self._code_prefix = code_prefix

    def _lookup(self, natural_key: str) -> Optional[Person]:
        key = (natural_key or "").strip()
        if not key:
            return None
        person = self._people.find_by_natural_key(key, category=PersonCategory.STUDENT) or self._people.get_by_id(key)
        # Only students are tracked in the ledger.
        if person is None or person.category != PersonCategory.STUDENT:
            return None
        return person

    def record_scan(self, natural_key: str, *, now: Optional[datetime] = None) -> ScanOutcome:
        now = now or now_local()
        today = now.date()
        moment = now.time().replace(microsecond=0)

        with self._attendance.transaction():
            person = self._lookup(natural_key)
            if not person:
                logger.info("Scan rejected: unknown identity %r", natural_key)
                return ScanOutcome.reject(RejectReason.UNKNOWN_IDENTITY)

            existing = self._attendance.get_for_person_and_date(person.person_id, today)
            strategy = self._factory.for_entry(existing)
            decision = strategy.decide(existing=existing, now=now)

            if decision.reason is not None:
                logger.info("Scan rejected for %s: %s", person.natural_key, decision.reason.value)
                return ScanOutcome.reject(decision.reason, person)

            if decision.action == ScanAction.CHECK_IN:
                entry = self._attendance.create_checkin(
                    person_id=person.person_id,
                    work_date=today,
                    check_in_time=moment,
                    status=decision.status,
                )
            else:
                entry = self._attendance.update_checkout(entry_id=existing.entry_id, check_out_time=moment)

        logger.info("%s recorded for %s at %s", decision.action.value, person.natural_key, moment.isoformat())
        return ScanOutcome.accept(decision.action, person, entry)

    def record_session_scan(self, natural_key: str, code: str, *, now: Optional[datetime] = None) -> ScanOutcome:
        """Self-scan: the person presents the session code they scanned."""

        now = now or now_local()
        try:
            codes.check_code(code, to_epoch_millis(now), self._code_window_ms, prefix=self._code_prefix)
        except MalformedCodeError:
            logger.info("Scan rejected for %s: malformed session code", natural_key)
            return ScanOutcome.reject(RejectReason.MALFORMED_CODE)
        except ExpiredCodeError:
            logger.info("Scan rejected for %s: expired session code", natural_key)
            return ScanOutcome.reject(RejectReason.EXPIRED_CODE)
        return self.record_scan(natural_key, now=now)
