from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.clock import format_timestamp, next_timestamp, utc_now
from jobtracker.core.errors import ValidationError, from_pydantic
from jobtracker.core.result import Err, Ok, Result
from jobtracker.types import InterviewType, NonEmptyStr, OptionalText, OptionalTimestamp, Timestamp


class Question(BaseModel):
    id: str
    title: NonEmptyStr
    answer: OptionalText = None


class InterviewStageCreate(BaseModel):
    job_application_id: NonEmptyStr
    round: int = Field(ge=1)
    interview_type: InterviewType
    is_final_round: bool = False
    scheduled_date: OptionalTimestamp = None
    completed_date: OptionalTimestamp = None
    notes: OptionalText = None
    questions: list[Question] = Field(default_factory=list)


class InterviewStageUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    round: int | None = Field(default=None, ge=1)
    interview_type: InterviewType | None = None
    is_final_round: bool | None = None
    scheduled_date: OptionalTimestamp = None
    completed_date: OptionalTimestamp = None
    notes: OptionalText = None
    questions: list[Question] | None = None


class InterviewStage(InterviewStageCreate):
    id: str
    created_at: Timestamp
    updated_at: Timestamp

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def create_interview_stage(
    data: InterviewStageCreate | Mapping[str, Any],
    id_factory: Callable[[], str],
    now: datetime | None = None,
) -> Result[InterviewStage, ValidationError]:
    try:
        payload = data if isinstance(data, InterviewStageCreate) else InterviewStageCreate.model_validate(dict(data))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))

    timestamp = format_timestamp(now or utc_now())
    return Ok(InterviewStage(**payload.model_dump(), id=id_factory(), created_at=timestamp, updated_at=timestamp))


def update_interview_stage(
    stage: InterviewStage,
    patch: InterviewStageUpdate | Mapping[str, Any],
    now: datetime | None = None,
) -> Result[InterviewStage, ValidationError]:
    try:
        if not isinstance(patch, InterviewStageUpdate):
            patch = InterviewStageUpdate.model_validate(dict(patch))
        merged = stage.model_dump()
        merged.update(patch.model_dump(include=patch.model_fields_set))
        merged["updated_at"] = next_timestamp(stage.updated_at, now)
        return Ok(InterviewStage.model_validate(merged))
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))


def add_question(
    stage: InterviewStage,
    title: str,
    id_factory: Callable[[], str],
    answer: str | None = None,
    now: datetime | None = None,
) -> Result[InterviewStage, ValidationError]:
    try:
        question = Question(id=id_factory(), title=title, answer=answer)
    except PydanticValidationError as exc:
        return Err(from_pydantic(exc))
    return update_interview_stage(stage, {"questions": [*stage.questions, question]}, now)
