"""Exception hierarchy for the Kanban platform.

All exceptions inherit from KanbanError so callers can catch
platform-level errors with a single except clause.
"""

from __future__ import annotations

from typing import Any


class KanbanError(Exception):
    """Base exception for all Kanban platform errors."""

    def __init__(self, message: str = "", *, details: dict[str, Any] | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


# =============================================================================
# Lookup Errors
# =============================================================================


class NotFoundError(KanbanError):
    """Raised when a requested resource does not exist."""


# =============================================================================
# Input Errors
# =============================================================================


class ValidationFailedError(KanbanError, ValueError):
    """Raised when a required input field is absent or malformed.

    Also a ``ValueError`` so pydantic validators can raise it and have it
    reported as a regular request validation failure.
    """


# =============================================================================
# Storage Errors
# =============================================================================


class StorageFailureError(KanbanError):
    """Raised when the backing store fails for reasons other than absence."""


class StorageConstraintError(StorageFailureError):
    """Raised when a write violates a database constraint."""
