from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import (
    FieldErrors,
    require_email,
    require_match,
    require_min_length,
    require_non_empty,
)
from ..core.constants import MIN_PASSWORD_LENGTH, RECENT_FACULTY_DAYS
from ..core.enums import PersonCategory, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import Person
from .repository import PersonRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    person_id: Optional[str]
    display_name: str
    natural_key: str
    role: Role
    department: Optional[str] = None


class AuthService:
    """Use case: authenticate a student, faculty member or the administrator."""

    def __init__(self, people: PersonRepository, *, admin_username: str, admin_password_hash: str):
        self._people = people
        self._admin_username = admin_username
        self._admin_password_hash = admin_password_hash

    def authenticate(self, category: PersonCategory, natural_key: str, secret: str) -> SessionUser:
        natural_key = (natural_key or "").strip()
        if not natural_key or not secret:
            raise AuthenticationError("Invalid username or password")

        if category == PersonCategory.FACULTY and natural_key == self._admin_username:
            if not check_password_hash(self._admin_password_hash, secret):
                raise AuthenticationError("Invalid username or password")
            logger.info("Administrator logged in")
            return SessionUser(person_id=None, display_name="Administrator", natural_key=natural_key, role=Role.ADMIN)

        person = self._people.find_by_natural_key(natural_key, category=category)
        if not person or not person.password_hash:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(person.password_hash, secret)
        except ValueError:
            # e.g. placeholder hashes or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        logger.info("%s %s logged in", category.value.capitalize(), person.natural_key)
        return SessionUser(
            person_id=person.person_id,
            display_name=person.display_name,
            natural_key=person.natural_key,
            role=Role(category.value),
            department=person.department,
        )


class PersonService:
    """Use case: register students and manage faculty (admin)."""

    def __init__(self, people: PersonRepository):
        self._people = people

    def register_student(
        self,
        *,
        full_name: str,
        roll_number: str,
        email: str,
        password: str,
        confirm_password: str,
        year: str,
        course: str,
        department: Optional[str] = None,
    ) -> str:
        errors = FieldErrors()
        full_name = errors.check("fullName", require_non_empty, full_name, "Full name")
        roll_number = errors.check("rollNumber", require_non_empty, roll_number, "Roll number")
        email = errors.check("email", require_email, email)
        errors.check("password", require_min_length, password, "Password", MIN_PASSWORD_LENGTH)
        errors.check("confirmPassword", require_match, confirm_password, password, "Password")
        year = errors.check("year", require_non_empty, year, "Year")
        course = errors.check("course", require_non_empty, course, "Course")

        if roll_number and self._people.find_by_natural_key(roll_number, category=PersonCategory.STUDENT):
            errors.add("rollNumber", "Roll number is already registered")
        errors.raise_if_any()

        person_id = self._people.create_person(
            display_name=full_name,
            natural_key=roll_number,
            category=PersonCategory.STUDENT,
            email=email,
            password_hash=generate_password_hash(password),
            year=year,
            course=course,
            department=(department or "").strip() or None,
        )
        logger.info("Registered student %s", roll_number)
        return person_id

    def list_students(self, *, search: str = "", course: str = "", year: str = "") -> Sequence[Person]:
        term = (search or "").strip().lower()
        out = []
        for s in self._people.list_by_category(PersonCategory.STUDENT):
            if term and term not in s.display_name.lower() and term not in s.natural_key.lower():
                continue
            if course and course not in (s.course or ""):
                continue
            if year and s.year != year:
                continue
            out.append(s)
        return out

    def add_faculty(
        self,
        *,
        current_role: Role,
        full_name: str,
        email: str,
        faculty_id: str,
        department: str,
        password: str,
    ) -> str:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        errors = FieldErrors()
        full_name = errors.check("fullName", require_non_empty, full_name, "Full name")
        email = errors.check("email", require_email, email)
        faculty_id = errors.check("facultyId", require_non_empty, faculty_id, "Faculty ID")
        department = errors.check("department", require_non_empty, department, "Department")
        errors.check("password", require_min_length, password, "Password", MIN_PASSWORD_LENGTH)

        if faculty_id and self._people.find_by_natural_key(faculty_id, category=PersonCategory.FACULTY):
            errors.add("facultyId", "Faculty ID already exists")
        errors.raise_if_any()

        person_id = self._people.create_person(
            display_name=full_name,
            natural_key=faculty_id,
            category=PersonCategory.FACULTY,
            email=email,
            password_hash=generate_password_hash(password),
            department=department,
        )
        logger.info("Added faculty %s", faculty_id)
        return person_id

    def edit_faculty(
        self,
        *,
        current_role: Role,
        person_id: str,
        full_name: str,
        email: str,
        department: str,
        password: Optional[str] = None,
    ) -> Person:
        """Update a faculty member; the faculty ID itself cannot change."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        member = self._people.get_by_id(person_id)
        if not member or member.category != PersonCategory.FACULTY:
            raise ValidationError("Faculty member not found")

        errors = FieldErrors()
        full_name = errors.check("fullName", require_non_empty, full_name, "Full name")
        email = errors.check("email", require_email, email)
        department = errors.check("department", require_non_empty, department, "Department")
        if password:
            errors.check("password", require_min_length, password, "Password", MIN_PASSWORD_LENGTH)
        errors.raise_if_any()

        updated = replace(
            member,
            display_name=full_name,
            email=email,
            department=department,
            password_hash=generate_password_hash(password) if password else member.password_hash,
        )
        if not self._people.update_person(updated):
            raise ValidationError("Failed to update faculty member")
        return updated

    def delete_faculty(self, *, current_role: Role, person_id: str) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        member = self._people.get_by_id(person_id)
        if not member or member.category != PersonCategory.FACULTY:
            raise ValidationError("Faculty member not found")

        if not self._people.delete_by_id(person_id):
            raise ValidationError("Failed to delete faculty member")
        logger.info("Deleted faculty %s", member.natural_key)

    def list_faculty(self, *, search: str = "") -> Sequence[Person]:
        term = (search or "").strip().lower()
        members = self._people.list_by_category(PersonCategory.FACULTY)
        if not term:
            return list(members)
        return [
            m
            for m in members
            if any(term in (v or "").lower() for v in (m.display_name, m.natural_key, m.department, m.email))
        ]

    def faculty_overview(self, *, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now()
        members = self._people.list_by_category(PersonCategory.FACULTY)
        cutoff = now - timedelta(days=RECENT_FACULTY_DAYS)
        recent = [
            m for m in members if m.created_at and m.created_at.replace(tzinfo=None) > cutoff
        ]
        return {
            "total": len(members),
            "recent": len(recent),
            "departments": len({m.department for m in members if m.department}),
        }
