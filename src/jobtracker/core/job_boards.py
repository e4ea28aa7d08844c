from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.clock import format_timestamp, utc_now
from jobtracker.core.errors import ValidationError, from_pydantic
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import NonEmptyStr, Timestamp


def normalize_domain(value: str) -> str:
    return value.strip().lower().rstrip(".")


def domain_from_url(url: str) -> str | None:
    """Host part of ``url``; bare domains without a scheme are accepted."""
    text = url.strip()
    if not text:
        return None
    parsed = urlparse(text if "://" in text else f"//{text}")
    host = parsed.hostname
    return normalize_domain(host) if host else None


class JobBoardCreate(BaseModel):
    name: NonEmptyStr
    root_domain: NonEmptyStr
    domains: list[str] = Field(default_factory=list)

    @field_validator("root_domain")
    @classmethod
    def validate_root_domain(cls, value: str) -> str:
        return normalize_domain(value)

    @model_validator(mode="after")
    def normalize_domains(self) -> JobBoardCreate:
        cleaned: list[str] = []
        for domain in [self.root_domain, *self.domains]:
            normalized = normalize_domain(domain)
            if normalized and normalized not in cleaned:
                cleaned.append(normalized)
        self.domains = cleaned
        return self


class JobBoard(JobBoardCreate):
    id: str
    created_at: Timestamp

    def matches(self, domain: str) -> bool:
        normalized = normalize_domain(domain)
        bare = normalized.removeprefix("www.")
        return normalized in self.domains or bare in self.domains or f"www.{bare}" in self.domains

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


COMMON_JOB_BOARDS: list[dict[str, Any]] = [
    {"name": "LinkedIn", "root_domain": "linkedin.com", "domains": ["linkedin.com", "www.linkedin.com"]},
    {"name": "Indeed", "root_domain": "indeed.com", "domains": ["indeed.com", "www.indeed.com"]},
    {"name": "Glassdoor", "root_domain": "glassdoor.com", "domains": ["glassdoor.com", "www.glassdoor.com"]},
    {
        "name": "ZipRecruiter",
        "root_domain": "ziprecruiter.com",
        "domains": ["ziprecruiter.com", "www.ziprecruiter.com"],
    },
    {"name": "Monster", "root_domain": "monster.com", "domains": ["monster.com", "www.monster.com"]},
    {
        "name": "CareerBuilder",
        "root_domain": "careerbuilder.com",
        "domains": ["careerbuilder.com", "www.careerbuilder.com"],
    },
    {"name": "AngelList", "root_domain": "angel.co", "domains": ["angel.co", "www.angel.co", "wellfound.com"]},
    {"name": "Dice", "root_domain": "dice.com", "domains": ["dice.com", "www.dice.com"]},
]


def create_job_board(
    data: JobBoardCreate | Mapping[str, Any],
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[JobBoard, ValidationError]:
    try:
        payload = data if isinstance(data, JobBoardCreate) else JobBoardCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))
    return Ok(JobBoard(**payload.model_dump(), id=id_factory(), created_at=format_timestamp(now or utc_now())))


def find_board(boards: list[JobBoard], domain: str) -> JobBoard | None:
    """Root domain match wins over a match in the domains list."""
    normalized = normalize_domain(domain)
    for board in boards:
        if board.root_domain == normalized:
            return board
    for board in boards:
        if board.matches(normalized):
            return board
    return None
