from __future__ import annotations

from pathlib import Path
from typing import Any

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import FileResponse, HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError as PydanticValidationError

from jobtracker.api.deps import get_container, status_code_for
from jobtracker.container import Container
from jobtracker.core.analytics import DateRange
from jobtracker.core.applications import JobApplication, is_overdue
from jobtracker.core.clock import calendar_day
from jobtracker.core.filters import filter_applications, status_label
from jobtracker.core.interviews import add_question
from jobtracker.core.result import Result
from jobtracker.core.status import current_status
from jobtracker.types import CONTACT_CHANNELS, CONTACT_ROLES, INTERVIEW_TYPES, SOURCE_TYPES, PipelineColumn, SortDirection

router = APIRouter(tags=["web"])
templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.globals.update(
    status_label=status_label,
    is_overdue=is_overdue,
    source_types=SOURCE_TYPES,
    contact_roles=CONTACT_ROLES,
    contact_channels=CONTACT_CHANNELS,
    interview_types=INTERVIEW_TYPES,
)
templates.env.filters["day"] = lambda value: calendar_day(value) if value else ""
static_dir = Path(__file__).resolve().parent / "static"


def _is_htmx(request: Request) -> bool:
    return request.headers.get("HX-Request") == "true"


def _error(request: Request, message: str, status_code: int | None = None) -> HTMLResponse:
    response = templates.TemplateResponse(
        request,
        "partials/error.html",
        {"message": message},
        status_code=status_code or status_code_for(message),
    )
    response.headers["HX-Retarget"] = "#flash"
    response.headers["HX-Reswap"] = "innerHTML"
    return response


def _not_found(request: Request, message: str) -> HTMLResponse:
    if _is_htmx(request):
        return _error(request, message, 404)
    return templates.TemplateResponse(request, "not_found.html", {"message": message}, status_code=404)


def _render_or_error(request: Request, result: Result[Any, str], render) -> Response:
    if result.is_err():
        message = result.unwrap_err()
        if status_code_for(message) == 404:
            return _not_found(request, message)
        return _error(request, message)
    return render(result.unwrap())


def _row(request: Request, container: Container, app: JobApplication) -> HTMLResponse:
    labels = container.pipeline.get().unwrap_or(None)
    return templates.TemplateResponse(request, "partials/application_row.html", {"app": app, "pipeline": labels})


def _application_form(
    company: str,
    position_title: str,
    application_date: str,
    interest_rating: str,
    next_event_date: str,
    job_posting_url: str,
    job_description: str,
    source_type: str,
    source_notes: str,
    is_remote: bool,
) -> dict[str, Any]:
    return {
        "company": company,
        "position_title": position_title,
        "application_date": application_date,
        "interest_rating": interest_rating,
        "next_event_date": next_event_date,
        "job_posting_url": job_posting_url,
        "job_description": job_description,
        "source_type": source_type or "other",
        "source_notes": source_notes,
        "is_remote": is_remote,
    }


def _icon_response(*filenames: str) -> Response:
    for filename in filenames:
        icon_path = static_dir / filename
        if icon_path.is_file():
            return FileResponse(icon_path)
    return Response(status_code=204)


@router.get("/favicon.ico", include_in_schema=False)
def favicon() -> Response:
    return _icon_response("favicon.ico", "favicon.svg")


@router.get("/apple-touch-icon.png", include_in_schema=False)
def apple_touch_icon() -> Response:
    return _icon_response("apple-touch-icon.png", "apple-touch-icon.svg")


@router.get("/", response_class=HTMLResponse)
def dashboard(
    request: Request,
    q: str = "",
    sort_by: PipelineColumn = "updated_at",
    direction: SortDirection = "desc",
    container: Container = Depends(get_container),
) -> Response:
    apps = container.manager.list_applications(sort_by, direction).map(lambda items: filter_applications(items, q))
    if apps.is_err():
        return _error(request, apps.unwrap_err())
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {
            "applications": apps.unwrap(),
            "overdue": container.manager.overdue().unwrap_or([]),
            "pipeline": container.pipeline.get().unwrap_or(None),
            "boards": container.boards.list_boards().unwrap_or([]),
            "q": q,
            "sort_by": sort_by,
            "direction": direction,
        },
    )


@router.get("/web/applications", response_class=HTMLResponse)
def application_rows(
    request: Request,
    q: str = "",
    sort_by: PipelineColumn = "updated_at",
    direction: SortDirection = "desc",
    container: Container = Depends(get_container),
) -> Response:
    result = container.manager.list_applications(sort_by, direction).map(lambda items: filter_applications(items, q))
    return _render_or_error(
        request,
        result,
        lambda apps: templates.TemplateResponse(
            request,
            "partials/application_rows.html",
            {"applications": apps, "pipeline": container.pipeline.get().unwrap_or(None)},
        ),
    )


@router.post("/web/applications")
def create_application(
    request: Request,
    company: str = Form(""),
    position_title: str = Form(""),
    application_date: str = Form(""),
    interest_rating: str = Form(""),
    next_event_date: str = Form(""),
    job_posting_url: str = Form(""),
    job_description: str = Form(""),
    source_type: str = Form("other"),
    source_notes: str = Form(""),
    is_remote: bool = Form(False),
    container: Container = Depends(get_container),
) -> Response:
    data = _application_form(
        company,
        position_title,
        application_date,
        interest_rating,
        next_event_date,
        job_posting_url,
        job_description,
        source_type,
        source_notes,
        is_remote,
    )
    if job_posting_url.strip():
        board = container.boards.resolve_for_url(job_posting_url).unwrap_or(None)
        if board is not None:
            data["job_board_id"] = board.id
            if data["source_type"] == "other":
                data["source_type"] = "job_board"

    result = container.manager.create(data)
    if result.is_err():
        return _error(request, result.unwrap_err())
    if _is_htmx(request):
        return _row(request, container, result.unwrap())
    return RedirectResponse(url="/", status_code=303)


@router.get("/web/applications/{app_id}/row", response_class=HTMLResponse)
def application_row(app_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    return _render_or_error(request, container.manager.get(app_id), lambda app: _row(request, container, app))


@router.get("/web/applications/{app_id}/edit", response_class=HTMLResponse)
def edit_application_row(app_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    return _render_or_error(
        request,
        container.manager.get(app_id),
        lambda app: templates.TemplateResponse(request, "partials/application_edit_row.html", {"app": app}),
    )


@router.post("/web/applications/{app_id}")
def update_application(
    app_id: str,
    request: Request,
    company: str = Form(""),
    position_title: str = Form(""),
    application_date: str = Form(""),
    interest_rating: str = Form(""),
    next_event_date: str = Form(""),
    job_posting_url: str = Form(""),
    job_description: str = Form(""),
    source_type: str = Form("other"),
    source_notes: str = Form(""),
    is_remote: bool = Form(False),
    container: Container = Depends(get_container),
) -> Response:
    patch = _application_form(
        company,
        position_title,
        application_date,
        interest_rating,
        next_event_date,
        job_posting_url,
        job_description,
        source_type,
        source_notes,
        is_remote,
    )
    result = container.manager.update(app_id, patch)
    if result.is_ok() and not _is_htmx(request):
        return RedirectResponse(url=f"/applications/{app_id}", status_code=303)
    return _render_or_error(request, result, lambda app: _row(request, container, app))


@router.post("/web/applications/{app_id}/status")
def change_status(
    app_id: str,
    request: Request,
    label: str = Form(...),
    note: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    result = container.manager.change_status(app_id, label, note or None)
    if result.is_ok() and not _is_htmx(request):
        return RedirectResponse(url=f"/applications/{app_id}", status_code=303)
    return _render_or_error(request, result, lambda app: _row(request, container, app))


@router.delete("/web/applications/{app_id}")
def delete_application(app_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    return _render_or_error(request, container.manager.delete(app_id), lambda _: HTMLResponse(""))


@router.get("/applications/{app_id}", response_class=HTMLResponse)
def application_detail(app_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    loaded = container.manager.get(app_id)
    if loaded.is_err():
        return _not_found(request, loaded.unwrap_err())

    app = loaded.unwrap()
    board = container.job_boards.get_by_id(app.job_board_id).unwrap_or(None) if app.job_board_id else None
    return templates.TemplateResponse(
        request,
        "application_detail.html",
        {
            "app": app,
            "app_id": app.id,
            "status": current_status(app).unwrap_or(None),
            "history": list(reversed(app.status_log)),
            "board": board,
            "contacts": container.contacts.get_by_job_application_id(app_id).unwrap_or([]),
            "interviews": container.interviews.get_by_job_application_id(app_id).unwrap_or([]),
            "pipeline": container.pipeline.get().unwrap_or(None),
        },
    )


def _notes_partial(request: Request, container: Container, app_id: str) -> Response:
    return _render_or_error(
        request,
        container.manager.get(app_id),
        lambda app: templates.TemplateResponse(request, "partials/notes.html", {"app": app}),
    )


@router.post("/web/applications/{app_id}/notes")
def add_note(
    app_id: str,
    request: Request,
    content: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    result = container.manager.add_note(app_id, content)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _notes_partial(request, container, app_id)


@router.post("/web/applications/{app_id}/notes/{note_id}")
def update_note(
    app_id: str,
    note_id: str,
    request: Request,
    content: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    result = container.manager.update_note(app_id, note_id, content)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _notes_partial(request, container, app_id)


@router.delete("/web/applications/{app_id}/notes/{note_id}")
def remove_note(app_id: str, note_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    result = container.manager.remove_note(app_id, note_id)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _notes_partial(request, container, app_id)


def _contacts_partial(request: Request, container: Container, app_id: str) -> Response:
    return _render_or_error(
        request,
        container.contacts.get_by_job_application_id(app_id),
        lambda contacts: templates.TemplateResponse(
            request, "partials/contacts.html", {"contacts": contacts, "app_id": app_id}
        ),
    )


@router.post("/web/applications/{app_id}/contacts")
def add_contact(
    app_id: str,
    request: Request,
    contact_name: str = Form(""),
    contact_email: str = Form(""),
    linkedin_url: str = Form(""),
    role: str = Form(""),
    channel: str = Form("other"),
    outreach_date: str = Form(""),
    response_received: bool = Form(False),
    notes: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    parent = container.manager.get(app_id)
    if parent.is_err():
        return _not_found(request, parent.unwrap_err())
    result = container.contacts.create(
        {
            "job_application_id": app_id,
            "contact_name": contact_name,
            "contact_email": contact_email,
            "linkedin_url": linkedin_url,
            "role": role or None,
            "channel": channel,
            "outreach_date": outreach_date,
            "response_received": response_received,
            "notes": notes,
        }
    )
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _contacts_partial(request, container, app_id)


@router.post("/web/contacts/{contact_id}/response")
def mark_contact_responded(contact_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    result = container.contacts.update(contact_id, {"response_received": True})
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _contacts_partial(request, container, result.unwrap().job_application_id)


@router.delete("/web/contacts/{contact_id}")
def delete_contact(contact_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    loaded = container.contacts.get_by_id(contact_id)
    if loaded.is_err():
        return _error(request, loaded.unwrap_err())
    result = container.contacts.delete(contact_id)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _contacts_partial(request, container, loaded.unwrap().job_application_id)


def _interviews_partial(request: Request, container: Container, app_id: str) -> Response:
    return _render_or_error(
        request,
        container.interviews.get_by_job_application_id(app_id),
        lambda stages: templates.TemplateResponse(
            request, "partials/interviews.html", {"interviews": stages, "app_id": app_id}
        ),
    )


@router.post("/web/applications/{app_id}/interviews")
def add_interview(
    app_id: str,
    request: Request,
    round_number: str = Form("", alias="round"),
    interview_type: str = Form("other"),
    is_final_round: bool = Form(False),
    scheduled_date: str = Form(""),
    completed_date: str = Form(""),
    notes: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    parent = container.manager.get(app_id)
    if parent.is_err():
        return _not_found(request, parent.unwrap_err())
    try:
        stage_round = int(round_number) if round_number.strip() else None
    except ValueError:
        return _error(request, f"round: '{round_number}' is not a whole number", 400)
    if stage_round is None:
        existing = container.interviews.get_by_job_application_id(app_id).unwrap_or([])
        stage_round = len(existing) + 1

    result = container.interviews.create(
        {
            "job_application_id": app_id,
            "round": stage_round,
            "interview_type": interview_type,
            "is_final_round": is_final_round,
            "scheduled_date": scheduled_date,
            "completed_date": completed_date,
            "notes": notes,
        }
    )
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _interviews_partial(request, container, app_id)


@router.post("/web/interviews/{stage_id}/questions")
def add_interview_question(
    stage_id: str,
    request: Request,
    title: str = Form(""),
    answer: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    loaded = container.interviews.get_by_id(stage_id)
    if loaded.is_err():
        return _error(request, loaded.unwrap_err())
    stage = loaded.unwrap()
    result = (
        add_question(stage, title, container.id_factory, answer or None, container.clock())
        .map_err(str)
        .and_then(container.interviews.save)
    )
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _interviews_partial(request, container, stage.job_application_id)


@router.delete("/web/interviews/{stage_id}")
def delete_interview(stage_id: str, request: Request, container: Container = Depends(get_container)) -> Response:
    loaded = container.interviews.get_by_id(stage_id)
    if loaded.is_err():
        return _error(request, loaded.unwrap_err())
    result = container.interviews.delete(stage_id)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return _interviews_partial(request, container, loaded.unwrap().job_application_id)


@router.get("/analytics", response_class=HTMLResponse)
def analytics_page(
    request: Request,
    start_date: str = "",
    end_date: str = "",
    container: Container = Depends(get_container),
) -> Response:
    try:
        date_range = DateRange(start_date=start_date, end_date=end_date)
    except PydanticValidationError as exc:
        return _error(request, f"Invalid date range: {exc.errors()[0]['msg']}", 400)

    result = container.analytics.compute_all_analytics(date_range)
    return _render_or_error(
        request,
        result,
        lambda analytics: templates.TemplateResponse(request, "analytics.html", {"analytics": analytics}),
    )


@router.get("/settings", response_class=HTMLResponse)
def settings_page(request: Request, container: Container = Depends(get_container)) -> Response:
    config = container.pipeline.get()
    return _render_or_error(
        request,
        config,
        lambda pipeline: templates.TemplateResponse(
            request,
            "settings.html",
            {"pipeline": pipeline, "boards": container.boards.list_boards().unwrap_or([])},
        ),
    )


@router.post("/web/pipeline/remove")
def remove_pipeline_label(
    request: Request,
    label: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    result = container.pipeline.remove_status(label)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/web/pipeline/{category}")
def add_pipeline_label(
    category: str,
    request: Request,
    label: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    if category == "active":
        result = container.pipeline.add_active_status(label)
    elif category == "inactive":
        result = container.pipeline.add_inactive_status(label)
    else:
        return _not_found(request, f"pipeline category not found: {category}")
    if result.is_err():
        return _error(request, result.unwrap_err())
    return RedirectResponse(url="/settings", status_code=303)


@router.post("/web/job-boards")
def register_job_board(
    request: Request,
    name: str = Form(""),
    url: str = Form(""),
    container: Container = Depends(get_container),
) -> Response:
    result = container.boards.register(name, url)
    if result.is_err():
        return _error(request, result.unwrap_err())
    return RedirectResponse(url="/settings", status_code=303)
