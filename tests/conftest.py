from __future__ import annotations

from datetime import datetime

import pytest

from qr_attendance.attendance.matcher import SessionMatcher
from qr_attendance.attendance.store_attendance_repository import StoreAttendanceRepository
from qr_attendance.core.enums import PersonCategory
from qr_attendance.main import create_app
from qr_attendance.people.store_person_repository import StorePersonRepository
from qr_attendance.storage.memory_store import InMemoryStore


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 15, 30)


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def people_repo(store) -> StorePersonRepository:
    return StorePersonRepository(store)


@pytest.fixture
def attendance_repo(store) -> StoreAttendanceRepository:
    return StoreAttendanceRepository(store)


@pytest.fixture
def student(people_repo):
    person_id = people_repo.create_person(
        display_name="Rahul Sharma",
        natural_key="21CSE001",
        category=PersonCategory.STUDENT,
        email="rahul@example.edu",
        password_hash=None,
        year="2021",
        course="B.Tech Computer Science",
        department="Computer Science",
    )
    return people_repo.get_by_id(person_id)


@pytest.fixture
def matcher(attendance_repo, people_repo) -> SessionMatcher:
    return SessionMatcher(attendance_repo, people_repo)


@pytest.fixture
def app():
    return create_app("qr_attendance.config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
