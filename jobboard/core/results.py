"""Tagged results returned by entitlement checks and domain operations.

Domain failures are values, not exceptions: callers inspect ``allowed`` /
``ok`` before acting. Storage and configuration faults still raise.
"""

from enum import StrEnum
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class ErrorKind(StrEnum):
    NOT_FOUND = "not_found"
    ENTITLEMENT_DENIED = "entitlement_denied"
    DUPLICATE_APPLICATION = "duplicate_application"
    ROLE_VIOLATION = "role_violation"
    INVALID_CREDENTIALS = "invalid_credentials"
    ACCOUNT_SUSPENDED = "account_suspended"
    UNAUTHENTICATED = "unauthenticated"
    EMAIL_TAKEN = "email_taken"


class Decision(BaseModel):
    """Outcome of an entitlement check."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)


class OperationResult(BaseModel, Generic[T]):
    """Outcome of a domain operation: success with a value, or a tagged failure."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    reason: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "OperationResult[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, reason: str) -> "OperationResult[T]":
        return cls(ok=False, error=error, reason=reason)
