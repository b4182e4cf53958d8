from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import generate_password_hash

from .attendance.factory import ScanStrategyFactory
from .attendance.matcher import SessionMatcher
from .attendance.store_attendance_repository import StoreAttendanceRepository
from .core.constants import DEFAULT_CODE_WINDOW_MS, SESSION_CODE_PREFIX
from .people.service import AuthService, PersonService
from .people.store_person_repository import StorePersonRepository
from .reports.service import ReportService
from .sessions.rotator import CodeRotator
from .storage.base import BaseStore
from .storage.connection import StoreConfig, open_store


@dataclass(frozen=True)
class Container:
    store: BaseStore

    people_repo: StorePersonRepository
    attendance_repo: StoreAttendanceRepository

    auth_service: AuthService
    person_service: PersonService
    matcher: SessionMatcher
    report_service: ReportService
    rotator: CodeRotator


def build_container(
    *,
    store_path: Optional[str],
    admin_username: str,
    admin_password: str,
    code_prefix: str = SESSION_CODE_PREFIX,
    code_window_ms: int = DEFAULT_CODE_WINDOW_MS,
    store: Optional[BaseStore] = None,
) -> Container:
    store = store or open_store(StoreConfig(path=store_path))

    people_repo = StorePersonRepository(store)
    attendance_repo = StoreAttendanceRepository(store)

    auth_service = AuthService(
        people_repo,
        admin_username=admin_username,
        admin_password_hash=generate_password_hash(admin_password),
    )
    person_service = PersonService(people_repo)
    matcher = SessionMatcher(
        attendance_repo,
        people_repo,
        strategy_factory=ScanStrategyFactory(),
        code_window_ms=code_window_ms,
        code_prefix=code_prefix,
    )
    report_service = ReportService(people_repo, attendance_repo)
    rotator = CodeRotator(window_ms=code_window_ms, prefix=code_prefix)

    return Container(
        store=store,
        people_repo=people_repo,
        attendance_repo=attendance_repo,
        auth_service=auth_service,
        person_service=person_service,
        matcher=matcher,
        report_service=report_service,
        rotator=rotator,
    )
