from __future__ import annotations

from typing import Annotated, Any, Literal, get_args

from pydantic import BeforeValidator, Field

from jobtracker.core.clock import normalize_timestamp

StatusCategory = Literal["active", "inactive"]
ActiveLabel = Literal[
    "applied",
    "screening interview",
    "interview",
    "onsite",
    "online test",
    "take-home assignment",
    "offer",
]
InactiveLabel = Literal["rejected", "no response", "no longer interested", "hiring freeze"]
SourceType = Literal["job_board", "referral", "company_website", "recruiter", "networking", "other"]
ContactRole = Literal["recruiter", "hiring manager", "employee", "referral", "other"]
ContactChannel = Literal["email", "linkedin", "phone", "referral", "other"]
InterviewType = Literal["phone screening", "technical", "behavioral", "onsite", "panel", "other"]
SortDirection = Literal["asc", "desc"]
PipelineColumn = Literal[
    "company",
    "position_title",
    "application_date",
    "interest_rating",
    "next_event_date",
    "status",
    "updated_at",
]

ACTIVE_LABELS: tuple[str, ...] = get_args(ActiveLabel)
INACTIVE_LABELS: tuple[str, ...] = get_args(InactiveLabel)
SOURCE_TYPES: tuple[str, ...] = get_args(SourceType)
CONTACT_ROLES: tuple[str, ...] = get_args(ContactRole)
CONTACT_CHANNELS: tuple[str, ...] = get_args(ContactChannel)
INTERVIEW_TYPES: tuple[str, ...] = get_args(InterviewType)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _timestamp(value: Any) -> Any:
    if isinstance(value, str):
        try:
            return normalize_timestamp(value)
        except ValueError as exc:
            raise ValueError(f"'{value}' is not an ISO-8601 date") from exc
    return value


def _optional_timestamp(value: Any) -> Any:
    value = _blank_to_none(value)
    return None if value is None else _timestamp(value)


NonEmptyStr = Annotated[str, BeforeValidator(_strip), Field(min_length=1)]
OptionalText = Annotated[str | None, BeforeValidator(_blank_to_none)]
Timestamp = Annotated[str, BeforeValidator(_timestamp)]
OptionalTimestamp = Annotated[str | None, BeforeValidator(_optional_timestamp)]
