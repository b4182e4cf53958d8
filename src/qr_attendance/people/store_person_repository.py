from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.constants import FACULTY_KEY, STUDENTS_KEY
from ..core.enums import PersonCategory
from ..core.exceptions import CorruptStoreError
from ..storage.base import KeyValueStore, load_collection, save_collection
from .model import Person
from .repository import PersonRepository

_COLLECTIONS = {
    PersonCategory.STUDENT: (STUDENTS_KEY, "rollNumber"),
    PersonCategory.FACULTY: (FACULTY_KEY, "facultyId"),
}


def _to_person(row: Dict[str, Any], category: PersonCategory) -> Person:
    key_field = _COLLECTIONS[category][1]
    try:
        created = row.get("createdAt")
        return Person(
            person_id=str(row["id"]),
            display_name=str(row["fullName"]),
            natural_key=str(row[key_field]),
            category=category,
            email=row.get("email"),
            password_hash=row.get("passwordHash"),
            year=row.get("year"),
            course=row.get("course"),
            department=row.get("department"),
            created_at=datetime.fromisoformat(created.replace("Z", "+00:00")) if created else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise CorruptStoreError(f"Malformed {category.value} record: {row!r}") from e


def _to_row(person: Person) -> Dict[str, Any]:
    key_field = _COLLECTIONS[person.category][1]
    row: Dict[str, Any] = {
        "id": person.person_id,
        "fullName": person.display_name,
        key_field: person.natural_key,
        "email": person.email,
        "department": person.department,
        "passwordHash": person.password_hash,
        "createdAt": person.created_at.isoformat() if person.created_at else None,
    }
    if person.category == PersonCategory.STUDENT:
        row["year"] = person.year
        row["course"] = person.course
    return row


class StorePersonRepository(PersonRepository):
    def __init__(self, store: KeyValueStore):
        self._store = store

    def _load(self, category: PersonCategory) -> list[Person]:
        key = _COLLECTIONS[category][0]
        return [_to_person(r, category) for r in load_collection(self._store, key)]

    def _save(self, category: PersonCategory, people: Sequence[Person]) -> None:
        save_collection(self._store, _COLLECTIONS[category][0], [_to_row(p) for p in people])

    def get_by_id(self, person_id: str) -> Optional[Person]:
        for category in PersonCategory:
            for p in self._load(category):
                if p.person_id == person_id:
                    return p
        return None

    def find_by_natural_key(self, natural_key: str, *, category: Optional[PersonCategory] = None) -> Optional[Person]:
        categories = [category] if category else list(PersonCategory)
        for c in categories:
            for p in self._load(c):
                if p.matches_key(natural_key):
                    return p
        return None

    def list_by_category(self, category: PersonCategory) -> Sequence[Person]:
        return self._load(category)

    def create_person(
        self,
        *,
        display_name: str,
        natural_key: str,
        category: PersonCategory,
        email: Optional[str],
        password_hash: Optional[str],
        year: Optional[str] = None,
        course: Optional[str] = None,
        department: Optional[str] = None,
    ) -> str:
        person = Person(
            person_id=uuid.uuid4().hex,
            display_name=display_name,
            natural_key=natural_key,
            category=category,
            email=email,
            password_hash=password_hash,
            year=year,
            course=course,
            department=department,
            created_at=datetime.now(),
        )
        with self._store.transaction():
            people = self._load(category)
            people.append(person)
            self._save(category, people)
        return person.person_id

    def update_person(self, person: Person) -> bool:
        with self._store.transaction():
            people = self._load(person.category)
            for i, p in enumerate(people):
                if p.person_id == person.person_id:
                    people[i] = person
                    self._save(person.category, people)
                    return True
        return False

    def delete_by_id(self, person_id: str) -> bool:
        with self._store.transaction():
            for category in PersonCategory:
                people = self._load(category)
                kept = [p for p in people if p.person_id != person_id]
                if len(kept) != len(people):
                    self._save(category, kept)
                    return True
        return False
