"""Domain error taxonomy shared by the services and the HTTP layer."""

from __future__ import annotations

from sqlalchemy.exc import IntegrityError

# purpose: give every failure a typed error that maps onto one response status
# status: active


class ArchiveError(Exception):
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ArchiveError):
    status_code = 422
    default_message = "Invalid input"


class Conflict(ArchiveError):
    status_code = 409
    default_message = "Resource already exists"


class NotFound(ArchiveError):
    status_code = 404
    default_message = "Not found"


class Unauthorized(ArchiveError):
    status_code = 401
    default_message = "Not authenticated"


class Forbidden(ArchiveError):
    status_code = 403
    default_message = "Not authorized"


class NoOpError(ArchiveError):
    status_code = 400
    default_message = "No fields to update"


class StorageError(ArchiveError):
    status_code = 503
    default_message = "Storage unavailable"


_UNIQUE_MARKERS = (
    "duplicate key",
    "unique constraint",
    "violates unique constraint",
    "unique constraint failed",
    "23505",
)


def is_unique_violation(exc: Exception) -> bool:
    """Return True when a storage error reports a uniqueness violation."""

    if not isinstance(exc, IntegrityError):
        return False
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    text = f"{exc} {orig or ''}".lower()
    return any(marker in text for marker in _UNIQUE_MARKERS)
