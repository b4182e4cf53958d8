from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` maps form field names to messages when the failure is
    field-level; it is empty for whole-request failures.
    """

    def __init__(self, message: str, errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors or {})


class CorruptStoreError(ValidationError):
    """Raised when persisted collections cannot be deserialized."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class MalformedCodeError(DomainError):
    """Raised when a session code does not follow the generation format."""


class ExpiredCodeError(DomainError):
    """Raised when a session code is outside its validity window."""
