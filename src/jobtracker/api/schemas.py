from __future__ import annotations

from pydantic import BaseModel, Field

from jobtracker.core import status as status_model
from jobtracker.core.applications import JobApplication
from jobtracker.core.filters import status_label
from jobtracker.core.status import ActiveStatus, InactiveStatus
from jobtracker.types import StatusCategory


class StatusChangeRequest(BaseModel):
    label: str
    note: str | None = None


class NoteRequest(BaseModel):
    content: str


class QuestionRequest(BaseModel):
    title: str
    answer: str | None = None


class LabelRequest(BaseModel):
    label: str


class JobBoardRegisterRequest(BaseModel):
    name: str
    url: str


class SeedResponse(BaseModel):
    inserted: int


class PipelineConfigResponse(BaseModel):
    active: list[str]
    inactive: list[str]


class ApplicationResponse(JobApplication):
    current_status: ActiveStatus | InactiveStatus | None = None
    current_category: StatusCategory | None = None
    current_label: str = ""

    @classmethod
    def from_entity(cls, app: JobApplication) -> ApplicationResponse:
        status = status_model.current_status(app).unwrap_or(None)
        return cls(
            **app.model_dump(),
            current_status=status,
            current_category=status.category if status else None,
            current_label=status_label(app),
        )


class ApplicationListResponse(BaseModel):
    items: list[ApplicationResponse] = Field(default_factory=list)
    total: int = 0
