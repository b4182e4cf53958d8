from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import PersonCategory
from .model import Person


class PersonRepository(Protocol):
    """Repository interface for the identity directory.

    Note (DIP): services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, person_id: str) -> Optional[Person]:
        raise NotImplementedError

    def find_by_natural_key(self, natural_key: str, *, category: Optional[PersonCategory] = None) -> Optional[Person]:
        raise NotImplementedError

    def list_by_category(self, category: PersonCategory) -> Sequence[Person]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_person(self, person: Person) -> bool:
        raise NotImplementedError

    def delete_by_id(self, person_id: str) -> bool:
        raise NotImplementedError
