from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from jobtracker.api.deps import get_container, unwrap_or_raise
from jobtracker.api.schemas import (
    ApplicationListResponse,
    ApplicationResponse,
    JobBoardRegisterRequest,
    LabelRequest,
    NoteRequest,
    PipelineConfigResponse,
    QuestionRequest,
    SeedResponse,
    StatusChangeRequest,
)
from jobtracker.container import Container
from jobtracker.core.analytics import CombinedAnalytics, DateRange
from jobtracker.core.applications import JobApplicationCreate, JobApplicationUpdate
from jobtracker.core.contacts import Contact, ContactCreate, ContactUpdate
from jobtracker.core.filters import filter_applications
from jobtracker.core.interviews import InterviewStage, InterviewStageCreate, InterviewStageUpdate, add_question
from jobtracker.core.job_boards import JobBoard
from jobtracker.core.notes import Note
from jobtracker.core.pipeline import PipelineConfig
from jobtracker.types import PipelineColumn, SortDirection

router = APIRouter(prefix="/api", tags=["api"])


def _config_response(config: PipelineConfig) -> PipelineConfigResponse:
    return PipelineConfigResponse(**config.to_data())


@router.get("/applications", response_model=ApplicationListResponse, response_model_exclude_none=True)
def list_applications(
    q: str | None = None,
    sort_by: PipelineColumn = "updated_at",
    direction: SortDirection = "desc",
    container: Container = Depends(get_container),
) -> ApplicationListResponse:
    apps = filter_applications(unwrap_or_raise(container.manager.list_applications(sort_by, direction)), q)
    items = [ApplicationResponse.from_entity(app) for app in apps]
    return ApplicationListResponse(items=items, total=len(items))


@router.post("/applications", response_model=ApplicationResponse, response_model_exclude_none=True)
def create_application(
    payload: JobApplicationCreate, container: Container = Depends(get_container)
) -> ApplicationResponse:
    return ApplicationResponse.from_entity(unwrap_or_raise(container.manager.create(payload)))


@router.get("/applications/overdue", response_model=ApplicationListResponse, response_model_exclude_none=True)
def overdue_applications(container: Container = Depends(get_container)) -> ApplicationListResponse:
    items = [ApplicationResponse.from_entity(app) for app in unwrap_or_raise(container.manager.overdue())]
    return ApplicationListResponse(items=items, total=len(items))


@router.get("/applications/{app_id}", response_model=ApplicationResponse, response_model_exclude_none=True)
def get_application(app_id: str, container: Container = Depends(get_container)) -> ApplicationResponse:
    return ApplicationResponse.from_entity(unwrap_or_raise(container.manager.get(app_id)))


@router.patch("/applications/{app_id}", response_model=ApplicationResponse, response_model_exclude_none=True)
def update_application(
    app_id: str,
    payload: JobApplicationUpdate,
    container: Container = Depends(get_container),
) -> ApplicationResponse:
    return ApplicationResponse.from_entity(unwrap_or_raise(container.manager.update(app_id, payload)))


@router.delete("/applications/{app_id}", status_code=204)
def delete_application(app_id: str, container: Container = Depends(get_container)) -> None:
    unwrap_or_raise(container.manager.delete(app_id))


@router.post("/applications/{app_id}/status", response_model=ApplicationResponse, response_model_exclude_none=True)
def change_status(
    app_id: str,
    payload: StatusChangeRequest,
    container: Container = Depends(get_container),
) -> ApplicationResponse:
    app = unwrap_or_raise(container.manager.change_status(app_id, payload.label, payload.note))
    return ApplicationResponse.from_entity(app)


@router.get("/applications/{app_id}/notes", response_model=list[Note])
def list_notes(app_id: str, container: Container = Depends(get_container)) -> list[Note]:
    return unwrap_or_raise(container.manager.list_notes(app_id))


@router.post("/applications/{app_id}/notes", response_model=Note)
def add_note(app_id: str, payload: NoteRequest, container: Container = Depends(get_container)) -> Note:
    return unwrap_or_raise(container.manager.add_note(app_id, payload.content))


@router.patch("/applications/{app_id}/notes/{note_id}", response_model=Note)
def update_note(
    app_id: str,
    note_id: str,
    payload: NoteRequest,
    container: Container = Depends(get_container),
) -> Note:
    return unwrap_or_raise(container.manager.update_note(app_id, note_id, payload.content))


@router.delete("/applications/{app_id}/notes/{note_id}", status_code=204)
def remove_note(app_id: str, note_id: str, container: Container = Depends(get_container)) -> None:
    unwrap_or_raise(container.manager.remove_note(app_id, note_id))


@router.get("/applications/{app_id}/contacts", response_model=list[Contact], response_model_exclude_none=True)
def list_application_contacts(app_id: str, container: Container = Depends(get_container)) -> list[Contact]:
    unwrap_or_raise(container.manager.get(app_id))
    return unwrap_or_raise(container.contacts.get_by_job_application_id(app_id))


@router.get(
    "/applications/{app_id}/interviews", response_model=list[InterviewStage], response_model_exclude_none=True
)
def list_application_interviews(app_id: str, container: Container = Depends(get_container)) -> list[InterviewStage]:
    unwrap_or_raise(container.manager.get(app_id))
    return unwrap_or_raise(container.interviews.get_by_job_application_id(app_id))


@router.post("/contacts", response_model=Contact, response_model_exclude_none=True)
def create_contact(payload: ContactCreate, container: Container = Depends(get_container)) -> Contact:
    unwrap_or_raise(container.manager.get(payload.job_application_id))
    return unwrap_or_raise(container.contacts.create(payload))


@router.get("/contacts/{contact_id}", response_model=Contact, response_model_exclude_none=True)
def get_contact(contact_id: str, container: Container = Depends(get_container)) -> Contact:
    return unwrap_or_raise(container.contacts.get_by_id(contact_id))


@router.patch("/contacts/{contact_id}", response_model=Contact, response_model_exclude_none=True)
def update_contact(
    contact_id: str,
    payload: ContactUpdate,
    container: Container = Depends(get_container),
) -> Contact:
    return unwrap_or_raise(container.contacts.update(contact_id, payload))


@router.delete("/contacts/{contact_id}", status_code=204)
def delete_contact(contact_id: str, container: Container = Depends(get_container)) -> None:
    unwrap_or_raise(container.contacts.delete(contact_id))


@router.post("/interviews", response_model=InterviewStage, response_model_exclude_none=True)
def create_interview(payload: InterviewStageCreate, container: Container = Depends(get_container)) -> InterviewStage:
    unwrap_or_raise(container.manager.get(payload.job_application_id))
    return unwrap_or_raise(container.interviews.create(payload))


@router.get("/interviews/{stage_id}", response_model=InterviewStage, response_model_exclude_none=True)
def get_interview(stage_id: str, container: Container = Depends(get_container)) -> InterviewStage:
    return unwrap_or_raise(container.interviews.get_by_id(stage_id))


@router.patch("/interviews/{stage_id}", response_model=InterviewStage, response_model_exclude_none=True)
def update_interview(
    stage_id: str,
    payload: InterviewStageUpdate,
    container: Container = Depends(get_container),
) -> InterviewStage:
    return unwrap_or_raise(container.interviews.update(stage_id, payload))


@router.post("/interviews/{stage_id}/questions", response_model=InterviewStage, response_model_exclude_none=True)
def add_interview_question(
    stage_id: str,
    payload: QuestionRequest,
    container: Container = Depends(get_container),
) -> InterviewStage:
    stage = unwrap_or_raise(container.interviews.get_by_id(stage_id))
    updated = unwrap_or_raise(
        add_question(stage, payload.title, container.id_factory, payload.answer, container.clock()).map_err(str)
    )
    return unwrap_or_raise(container.interviews.save(updated))


@router.delete("/interviews/{stage_id}", status_code=204)
def delete_interview(stage_id: str, container: Container = Depends(get_container)) -> None:
    unwrap_or_raise(container.interviews.delete(stage_id))


@router.get("/job-boards", response_model=list[JobBoard])
def list_job_boards(container: Container = Depends(get_container)) -> list[JobBoard]:
    return unwrap_or_raise(container.boards.list_boards())


@router.post("/job-boards", response_model=JobBoard)
def register_job_board(payload: JobBoardRegisterRequest, container: Container = Depends(get_container)) -> JobBoard:
    return unwrap_or_raise(container.boards.register(payload.name, payload.url))


@router.get("/job-boards/lookup", response_model=JobBoard | None)
def lookup_job_board(url: str, container: Container = Depends(get_container)) -> JobBoard | None:
    return unwrap_or_raise(container.boards.resolve_for_url(url))


@router.post("/job-boards/seed", response_model=SeedResponse)
def seed_job_boards(container: Container = Depends(get_container)) -> SeedResponse:
    return SeedResponse(inserted=unwrap_or_raise(container.boards.seed()))


@router.delete("/job-boards/{board_id}", status_code=204)
def delete_job_board(board_id: str, container: Container = Depends(get_container)) -> None:
    unwrap_or_raise(container.boards.delete(board_id))


@router.get("/pipeline", response_model=PipelineConfigResponse)
def get_pipeline(container: Container = Depends(get_container)) -> PipelineConfigResponse:
    return _config_response(unwrap_or_raise(container.pipeline.get()))


@router.post("/pipeline/active", response_model=PipelineConfigResponse)
def add_active_label(payload: LabelRequest, container: Container = Depends(get_container)) -> PipelineConfigResponse:
    return _config_response(unwrap_or_raise(container.pipeline.add_active_status(payload.label)))


@router.post("/pipeline/inactive", response_model=PipelineConfigResponse)
def add_inactive_label(payload: LabelRequest, container: Container = Depends(get_container)) -> PipelineConfigResponse:
    return _config_response(unwrap_or_raise(container.pipeline.add_inactive_status(payload.label)))


@router.delete("/pipeline/{label}", response_model=PipelineConfigResponse)
def remove_label(label: str, container: Container = Depends(get_container)) -> PipelineConfigResponse:
    return _config_response(unwrap_or_raise(container.pipeline.remove_status(label)))


@router.get("/analytics", response_model=CombinedAnalytics)
def get_analytics(
    start_date: str | None = Query(default=None),
    end_date: str | None = Query(default=None),
    container: Container = Depends(get_container),
) -> CombinedAnalytics:
    try:
        date_range = DateRange(start_date=start_date, end_date=end_date)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return unwrap_or_raise(container.analytics.compute_all_analytics(date_range))

