from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Annotated, Any
from urllib.parse import urlparse

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.clock import format_timestamp, next_timestamp, utc_now
from jobtracker.core.errors import ValidationError, from_pydantic
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import ContactChannel, ContactRole, NonEmptyStr, OptionalText, Timestamp


def _email(value: str | None) -> str | None:
    if value is None:
        return None
    local, _, domain = value.partition("@")
    if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
        raise ValueError(f"'{value}' is not a valid email address")
    return value


def _http_url(value: str | None) -> str | None:
    if value is None:
        return None
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"'{value}' is not an http(s) URL")
    return value


OptionalEmail = Annotated[OptionalText, AfterValidator(_email)]
OptionalUrl = Annotated[OptionalText, AfterValidator(_http_url)]


class ContactCreate(BaseModel):
    job_application_id: NonEmptyStr
    contact_name: NonEmptyStr
    contact_email: OptionalEmail = None
    linkedin_url: OptionalUrl = None
    role: ContactRole | None = None
    channel: ContactChannel = "other"
    outreach_date: Timestamp
    response_received: bool = False
    notes: OptionalText = None


class ContactUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    contact_name: NonEmptyStr | None = None
    contact_email: OptionalEmail = None
    linkedin_url: OptionalUrl = None
    role: ContactRole | None = None
    channel: ContactChannel | None = None
    outreach_date: Timestamp | None = None
    response_received: bool | None = None
    notes: OptionalText = None


class Contact(ContactCreate):
    id: str
    created_at: Timestamp
    updated_at: Timestamp

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def create_contact(
    data: ContactCreate | Mapping[str, Any],
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[Contact, ValidationError]:
    try:
        payload = data if isinstance(data, ContactCreate) else ContactCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))

    timestamp = format_timestamp(now or utc_now())
    return Ok(Contact(**payload.model_dump(), id=id_factory(), created_at=timestamp, updated_at=timestamp))


def update_contact(
    contact: Contact,
    patch: ContactUpdate | Mapping[str, Any],
    now: datetime | None = None,
) -> Result[Contact, ValidationError]:
    """Return a new contact with the fields set on ``patch`` applied."""
    try:
        if not isinstance(patch, ContactUpdate):
            patch = ContactUpdate.model_validate(dict(patch))
        merged = contact.model_dump()
        merged.update(patch.model_dump(include=patch.model_fields_set))
        merged["updated_at"] = next_timestamp(contact.updated_at, now)
        return Ok(Contact.model_validate(merged))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))
