"""
Status history model.

An application's status log is an ordered sequence of ``(timestamp, status)``
pairs. Timestamps are canonical UTC strings and strictly increasing, so the
last entry is always the current status and list order is chronological
order. Entries are appended, never removed or rewritten.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Annotated, Literal, NamedTuple, Union

from pydantic import BaseModel, ConfigDict, Field

from jobtracker.core.clock import next_timestamp
from jobtracker.core.errors import NotFoundError, ValidationError
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import (
    ACTIVE_LABELS,
    INACTIVE_LABELS,
    ActiveLabel,
    InactiveLabel,
    OptionalText,
    StatusCategory,
    Timestamp,
)

if TYPE_CHECKING:
    from jobtracker.core.applications import JobApplication


class ActiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Literal["active"] = "active"
    label: ActiveLabel
    note: OptionalText = None


class InactiveStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    category: Literal["inactive"] = "inactive"
    label: InactiveLabel
    note: OptionalText = None


ApplicationStatus = Annotated[Union[ActiveStatus, InactiveStatus], Field(discriminator="category")]


class StatusLogEntry(NamedTuple):
    timestamp: Timestamp
    status: ApplicationStatus


def status_for_label(label: str, note: str | None = None) -> Result[ActiveStatus | InactiveStatus, ValidationError]:
    cleaned = label.strip().lower()
    if cleaned in ACTIVE_LABELS:
        return Ok(ActiveStatus(label=cleaned, note=note))
    if cleaned in INACTIVE_LABELS:
        return Ok(InactiveStatus(label=cleaned, note=note))
    return Err(ValidationError("status", f"unknown status label '{label}'"))


def order_status_log(entries: list[StatusLogEntry]) -> list[StatusLogEntry]:
    """Sort entries chronologically and reject duplicate timestamps."""
    ordered = sorted(entries, key=lambda entry: entry.timestamp)
    for previous, current in zip(ordered, ordered[1:]):
        if previous.timestamp == current.timestamp:
            raise ValueError(f"duplicate status log timestamp {current.timestamp}")
    return ordered


def current_status_entry(app: JobApplication) -> Result[StatusLogEntry, NotFoundError]:
    if not app.status_log:
        return Err(NotFoundError("status", app.id))
    return Ok(app.status_log[-1])


def current_status(app: JobApplication) -> Result[ActiveStatus | InactiveStatus, NotFoundError]:
    return current_status_entry(app).map(lambda entry: entry.status)


def status_category(app: JobApplication) -> Result[StatusCategory, NotFoundError]:
    return current_status(app).map(lambda status: status.category)


def has_status(app: JobApplication) -> bool:
    return len(app.status_log) > 0


def is_active(app: JobApplication) -> bool:
    return status_category(app).unwrap_or(None) == "active"


def is_inactive(app: JobApplication) -> bool:
    return status_category(app).unwrap_or(None) == "inactive"


def append_status(
    app: JobApplication,
    status: ActiveStatus | InactiveStatus,
    now: datetime | None = None,
) -> JobApplication:
    timestamp = next_timestamp(app.updated_at, now)
    app.status_log.append(StatusLogEntry(timestamp, status))
    app.updated_at = timestamp
    return app
