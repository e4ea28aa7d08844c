"""
Error hierarchy for the tracker domain.

These are carried as values inside ``Err`` on expected failure paths; they
are only raised for programmer errors or inside storage adapters, which
convert them back into ``Err`` before crossing the port boundary.
"""
from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError


class TrackerError(Exception):
    """Base class for all tracker errors"""


class ValidationError(TrackerError):
    """Input failed an entity constraint"""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class NotFoundError(TrackerError):
    """An id lookup missed"""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class StorageError(TrackerError):
    """A storage adapter failed to read, write or decode"""

    def __init__(self, message: str, cause: BaseException | None = None):
        self.message = message
        self.cause = cause
        detail = f"{message}: {cause}" if cause is not None else message
        super().__init__(detail)


def from_pydantic(exc: PydanticValidationError) -> ValidationError:
    first = exc.errors()[0] if exc.errors() else {"loc": (), "msg": str(exc)}
    field = ".".join(str(part) for part in first.get("loc", ())) or "__root__"
    message = str(first.get("msg", "invalid value"))
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    return ValidationError(field, message)
