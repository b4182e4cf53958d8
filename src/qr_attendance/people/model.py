from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import PersonCategory


@dataclass(frozen=True)
class Person:
    """Domain entity: a student or faculty member.

    ``natural_key`` is the roll number for students and the faculty ID for
    faculty; it never changes once the person is created.
    """

    person_id: str
    display_name: str
    natural_key: str
    category: PersonCategory
    email: Optional[str] = None
    password_hash: Optional[str] = None
    year: Optional[str] = None
    course: Optional[str] = None
    department: Optional[str] = None
    created_at: Optional[datetime] = None

    def matches_key(self, key: str) -> bool:
        return self.natural_key.lower() == key.lower()
