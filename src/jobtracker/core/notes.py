from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.clock import next_timestamp
from jobtracker.core.errors import NotFoundError, TrackerError, from_pydantic
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import NonEmptyStr, Timestamp

if TYPE_CHECKING:
    from jobtracker.core.applications import JobApplication


class Note(BaseModel):
    id: str
    content: NonEmptyStr
    created_at: Timestamp
    updated_at: Timestamp


def _find(app: JobApplication, note_id: str) -> Note | None:
    return next((note for note in app.notes if note.id == note_id), None)


def list_notes(app: JobApplication) -> list[Note]:
    return list(app.notes)


def get_note(app: JobApplication, note_id: str) -> Result[Note, NotFoundError]:
    note = _find(app, note_id)
    if note is None:
        return Err(NotFoundError("note", note_id))
    return Ok(note)


def add_note(
    app: JobApplication,
    content: str,
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[Note, TrackerError]:
    timestamp = next_timestamp(app.updated_at, now)
    try:
        note = Note(id=id_factory(), content=content, created_at=timestamp, updated_at=timestamp)
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))
    app.notes.append(note)
    app.updated_at = timestamp
    return Ok(note)


def update_note(
    app: JobApplication,
    note_id: str,
    content: str,
    now: datetime | None = None,
) -> Result[Note, TrackerError]:
    existing = _find(app, note_id)
    if existing is None:
        return Err(NotFoundError("note", note_id))
    timestamp = next_timestamp(app.updated_at, now)
    try:
        updated = Note(id=note_id, content=content, created_at=existing.created_at, updated_at=timestamp)
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))
    app.notes[app.notes.index(existing)] = updated
    app.updated_at = timestamp
    return Ok(updated)


def remove_note(app: JobApplication, note_id: str, now: datetime | None = None) -> Result[None, TrackerError]:
    existing = _find(app, note_id)
    if existing is None:
        return Err(NotFoundError("note", note_id))
    app.notes.remove(existing)
    app.updated_at = next_timestamp(app.updated_at, now)
    return Ok(None)
