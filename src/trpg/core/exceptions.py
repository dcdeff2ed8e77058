"""Errors raised at the persistence and service boundary.

Account records never raise these themselves. Repositories and the account
service detect the violation, and callers receive it unchanged.
"""

from __future__ import annotations

from typing import Any


class TrpgError(Exception):
    """Base class for all domain errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details: dict[str, Any] = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert the error to a dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"{self.message}{details_str}"


class NotFoundError(TrpgError):
    """A record looked up by id does not exist."""


class ConflictError(TrpgError):
    """Duplicate identity or a concurrent update on the same record."""


class ValidationError(TrpgError):
    """A value breaks a rule the record itself does not enforce."""


class OwnershipError(TrpgError):
    """An owned instance is already attached to another account."""
