"""
Job application aggregate.

A ``JobApplication`` owns its status log and notes. Every mutation goes
through the functions in this module (or ``core.status`` / ``core.notes``),
which bump ``updated_at`` with a strictly increasing timestamp.
"""
from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.clock import format_timestamp, next_timestamp, parse_timestamp, utc_now
from jobtracker.core.errors import ValidationError, from_pydantic
from jobtracker.core.notes import Note
from jobtracker.core.result import Err, Ok, Result
from jobtracker.core.status import ActiveStatus, InactiveStatus, StatusLogEntry, append_status, order_status_log
from jobtracker.types import NonEmptyStr, OptionalText, OptionalTimestamp, SourceType, Timestamp


def _rating(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        try:
            return int(value)
        except ValueError as exc:
            raise ValueError(f"'{value}' is not a whole number") from exc
    return value


InterestRating = Annotated[Annotated[int, Field(ge=1, le=3)] | None, BeforeValidator(_rating)]


class JobApplicationCreate(BaseModel):
    company: NonEmptyStr
    position_title: NonEmptyStr
    application_date: Timestamp
    interest_rating: InterestRating = None
    next_event_date: OptionalTimestamp = None
    job_posting_url: OptionalText = None
    job_description: OptionalText = None
    source_type: SourceType = "other"
    job_board_id: OptionalText = None
    source_notes: OptionalText = None
    is_remote: bool = False


class JobApplicationUpdate(BaseModel):
    """Partial update. Only fields explicitly set are applied."""

    model_config = ConfigDict(extra="forbid")

    company: NonEmptyStr | None = None
    position_title: NonEmptyStr | None = None
    application_date: Timestamp | None = None
    interest_rating: InterestRating = None
    next_event_date: OptionalTimestamp = None
    job_posting_url: OptionalText = None
    job_description: OptionalText = None
    source_type: SourceType | None = None
    job_board_id: OptionalText = None
    source_notes: OptionalText = None
    is_remote: bool | None = None


class JobApplication(JobApplicationCreate):
    id: str
    created_at: Timestamp
    updated_at: Timestamp
    status_log: list[StatusLogEntry] = Field(default_factory=list)
    notes: list[Note] = Field(default_factory=list)

    @field_validator("status_log")
    @classmethod
    def validate_status_log(cls, value: list[StatusLogEntry]) -> list[StatusLogEntry]:
        return order_status_log(value)

    @model_validator(mode="after")
    def validate_timestamps(self) -> JobApplication:
        if self.updated_at < self.created_at:
            raise ValueError("updated_at must not be earlier than created_at")
        return self

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def _parse_create(data: JobApplicationCreate | Mapping[str, Any]) -> Result[JobApplicationCreate, ValidationError]:
    if isinstance(data, JobApplicationCreate):
        return Ok(data)
    try:
        return Ok(JobApplicationCreate.model_validate(dict(data)))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))


def create_job_application(
    data: JobApplicationCreate | Mapping[str, Any],
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[JobApplication, ValidationError]:
    def build(payload: JobApplicationCreate) -> JobApplication:
        timestamp = format_timestamp(now or utc_now())
        return JobApplication(
            **payload.model_dump(),
            id=id_factory(),
            created_at=timestamp,
            updated_at=timestamp,
        )

    return _parse_create(data).map(build)


def create_job_application_with_initial_status(
    data: JobApplicationCreate | Mapping[str, Any],
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[JobApplication, ValidationError]:
    def seed(app: JobApplication) -> JobApplication:
        app.status_log.append(StatusLogEntry(app.created_at, ActiveStatus(label="applied")))
        return app

    return create_job_application(data, id_factory, now).map(seed)


def update_job_application(
    app: JobApplication,
    patch: JobApplicationUpdate | Mapping[str, Any],
    now: datetime | None = None,
) -> Result[JobApplication, ValidationError]:
    """Merge ``patch`` into ``app`` in place; the id, creation time, status
    log and notes are never touched here."""
    try:
        if not isinstance(patch, JobApplicationUpdate):
            patch = JobApplicationUpdate.model_validate(dict(patch))
        merged = app.model_dump()
        merged.update(patch.model_dump(include=patch.model_fields_set))
        merged["updated_at"] = next_timestamp(app.updated_at, now)
        updated = JobApplication.model_validate(merged)
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))

    for name in JobApplication.model_fields:
        setattr(app, name, getattr(updated, name))
    return Ok(app)


def is_overdue(app: JobApplication, now: datetime | None = None) -> bool:
    if not app.next_event_date:
        return False
    return parse_timestamp(app.next_event_date) < (now or utc_now())


def new_status(
    app: JobApplication,
    status: ActiveStatus | InactiveStatus,
    now: datetime | None = None,
) -> JobApplication:
    return append_status(app, status, now)
