from __future__ import annotations

import re
from typing import Any, Callable, Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if not value:
        raise ValidationError(f"{field_name} is required")
    if len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str], field_name: str = "Email") -> str:
    value = require_non_empty(value, field_name)
    if not _EMAIL_RE.search(value):
        raise ValidationError(f"Please enter a valid {field_name.lower()}")
    return value


def require_match(value: Optional[str], expected: Optional[str], field_name: str) -> str:
    if not value:
        raise ValidationError(f"Please confirm your {field_name.lower()}")
    if value != expected:
        raise ValidationError(f"{field_name}s do not match")
    return value


class FieldErrors:
    """Collect per-field validation failures and raise them together.

    Forms report every invalid field at once instead of stopping at the
    first one.
    """

    def __init__(self) -> None:
        self._errors: dict[str, str] = {}

    def check(self, field: str, validator: Callable[..., Any], *args: Any) -> Any:
        try:
            return validator(*args)
        except ValidationError as e:
            self._errors.setdefault(field, str(e))
            return None

    def add(self, field: str, message: str) -> None:
        self._errors.setdefault(field, message)

    def raise_if_any(self, message: str = "Please correct the highlighted fields") -> None:
        if self._errors:
            raise ValidationError(message, self._errors)
