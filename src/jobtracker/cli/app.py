from __future__ import annotations

import json
from typing import Any

import typer
import uvicorn
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jobtracker.api.app import create_app
from jobtracker.config import get_settings
from jobtracker.container import Container, build_container
from jobtracker.core.analytics import DateRange
from jobtracker.core.filters import SORT_KEYS, filter_applications
from jobtracker.core.result import Err, Result
from jobtracker.core.status import status_for_label
from jobtracker.logging_config import configure_logging

app = typer.Typer(help="Job Tracker CLI")
apps_app = typer.Typer(help="Track job applications")
contacts_app = typer.Typer(help="Contacts for an application")
interviews_app = typer.Typer(help="Interview rounds for an application")
pipeline_app = typer.Typer(help="Pipeline status labels")
boards_app = typer.Typer(help="Known job boards")

app.add_typer(apps_app, name="apps")
app.add_typer(contacts_app, name="contacts")
app.add_typer(interviews_app, name="interviews")
app.add_typer(pipeline_app, name="pipeline")
app.add_typer(boards_app, name="boards")


@app.callback()
def main(ctx: typer.Context) -> None:
    settings = get_settings()
    configure_logging(settings)
    container = build_container(settings)
    container.bootstrap()
    ctx.obj = container
    ctx.call_on_close(container.close)


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", exclude_none=True)
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _echo(payload: Any) -> None:
    typer.echo(json.dumps(_plain(payload), indent=2))


def _emit(result: Result[Any, str]) -> None:
    if result.is_err():
        typer.echo(json.dumps({"ok": False, "error": str(result.unwrap_err())}, indent=2), err=True)
        raise typer.Exit(code=1)
    _echo(result.unwrap())


@app.command("init")
def init_cmd(ctx: typer.Context) -> None:
    """Create data directories, schema and the common job boards."""
    container: Container = ctx.obj
    settings = container.settings
    _echo(
        {
            "ok": True,
            "storage": settings.storage_backend,
            "database_url": settings.database_url if settings.storage_backend == "sqlite" else None,
            "json_store_path": str(settings.json_store_path) if settings.storage_backend == "json" else None,
        }
    )


@apps_app.command("list")
def apps_list(
    ctx: typer.Context,
    q: str = typer.Option("", "--q", help="Filter by company, position or status"),
    sort_by: str = typer.Option("updated_at", "--sort-by"),
    direction: str = typer.Option("desc", "--direction"),
) -> None:
    if sort_by not in SORT_KEYS:
        raise typer.BadParameter(f"sort column must be one of {sorted(SORT_KEYS)}")
    if direction not in ("asc", "desc"):
        raise typer.BadParameter("direction must be asc or desc")
    container: Container = ctx.obj
    _emit(container.manager.list_applications(sort_by, direction).map(lambda apps: filter_applications(apps, q)))


@apps_app.command("add")
def apps_add(
    ctx: typer.Context,
    company: str = typer.Option(..., "--company"),
    position: str = typer.Option(..., "--position"),
    date: str = typer.Option(..., "--date", help="Application date (ISO-8601)"),
    interest: int | None = typer.Option(None, "--interest", min=1, max=3),
    next_event: str | None = typer.Option(None, "--next-event"),
    url: str | None = typer.Option(None, "--url"),
    source: str = typer.Option("other", "--source"),
    remote: bool = typer.Option(False, "--remote"),
    status: str | None = typer.Option(None, "--status", help="Initial status label"),
) -> None:
    container: Container = ctx.obj
    if status:
        initial = status_for_label(status)
        if initial.is_err():
            _emit(Err(str(initial.unwrap_err())))
    data: dict[str, Any] = {
        "company": company,
        "position_title": position,
        "application_date": date,
        "interest_rating": interest,
        "next_event_date": next_event,
        "job_posting_url": url,
        "source_type": source,
        "is_remote": remote,
    }
    if url:
        board = container.boards.resolve_for_url(url).unwrap_or(None)
        if board is not None:
            data["job_board_id"] = board.id
            if source == "other":
                data["source_type"] = "job_board"

    created = container.manager.create(data)
    if status and created.is_ok():
        created = container.manager.change_status(created.unwrap().id, status)
    _emit(created)


@apps_app.command("show")
def apps_show(ctx: typer.Context, app_id: str = typer.Option(..., "--id")) -> None:
    container: Container = ctx.obj
    _emit(container.manager.get(app_id))


@apps_app.command("update")
def apps_update(
    ctx: typer.Context,
    app_id: str = typer.Option(..., "--id"),
    company: str | None = typer.Option(None, "--company"),
    position: str | None = typer.Option(None, "--position"),
    interest: str | None = typer.Option(None, "--interest", help="1-3, or empty to clear"),
    next_event: str | None = typer.Option(None, "--next-event", help="ISO-8601 date, or empty to clear"),
    remote: bool | None = typer.Option(None, "--remote/--on-site"),
) -> None:
    container: Container = ctx.obj
    patch = {
        key: value
        for key, value in {
            "company": company,
            "position_title": position,
            "interest_rating": interest,
            "next_event_date": next_event,
            "is_remote": remote,
        }.items()
        if value is not None
    }
    _emit(container.manager.update(app_id, patch))


@apps_app.command("status")
def apps_status(
    ctx: typer.Context,
    app_id: str = typer.Option(..., "--id"),
    label: str = typer.Option(..., "--label"),
    note: str | None = typer.Option(None, "--note"),
) -> None:
    container: Container = ctx.obj
    _emit(container.manager.change_status(app_id, label, note))


@apps_app.command("note")
def apps_note(
    ctx: typer.Context,
    app_id: str = typer.Option(..., "--id"),
    content: str = typer.Option(..., "--content"),
) -> None:
    container: Container = ctx.obj
    _emit(container.manager.add_note(app_id, content))


@apps_app.command("overdue")
def apps_overdue(ctx: typer.Context) -> None:
    container: Container = ctx.obj
    _emit(container.manager.overdue())


@apps_app.command("delete")
def apps_delete(ctx: typer.Context, app_id: str = typer.Option(..., "--id")) -> None:
    container: Container = ctx.obj
    _emit(container.manager.delete(app_id).map(lambda _: {"ok": True, "deleted": app_id}))


@contacts_app.command("add")
def contacts_add(
    ctx: typer.Context,
    app_id: str = typer.Option(..., "--app-id"),
    name: str = typer.Option(..., "--name"),
    outreach_date: str = typer.Option(..., "--outreach-date"),
    email: str | None = typer.Option(None, "--email"),
    linkedin: str | None = typer.Option(None, "--linkedin"),
    role: str | None = typer.Option(None, "--role"),
    channel: str = typer.Option("other", "--channel"),
    responded: bool = typer.Option(False, "--responded"),
) -> None:
    container: Container = ctx.obj
    parent = container.manager.get(app_id)
    if parent.is_err():
        _emit(parent)
    _emit(
        container.contacts.create(
            {
                "job_application_id": app_id,
                "contact_name": name,
                "contact_email": email,
                "linkedin_url": linkedin,
                "role": role,
                "channel": channel,
                "outreach_date": outreach_date,
                "response_received": responded,
            }
        )
    )


@contacts_app.command("list")
def contacts_list(ctx: typer.Context, app_id: str = typer.Option(..., "--app-id")) -> None:
    container: Container = ctx.obj
    _emit(container.contacts.get_by_job_application_id(app_id))


@interviews_app.command("add")
def interviews_add(
    ctx: typer.Context,
    app_id: str = typer.Option(..., "--app-id"),
    round_number: int = typer.Option(..., "--round", min=1),
    interview_type: str = typer.Option("other", "--type"),
    scheduled: str | None = typer.Option(None, "--scheduled"),
    completed: str | None = typer.Option(None, "--completed"),
    final: bool = typer.Option(False, "--final"),
) -> None:
    container: Container = ctx.obj
    parent = container.manager.get(app_id)
    if parent.is_err():
        _emit(parent)
    _emit(
        container.interviews.create(
            {
                "job_application_id": app_id,
                "round": round_number,
                "interview_type": interview_type,
                "scheduled_date": scheduled,
                "completed_date": completed,
                "is_final_round": final,
            }
        )
    )


@interviews_app.command("list")
def interviews_list(ctx: typer.Context, app_id: str = typer.Option(..., "--app-id")) -> None:
    container: Container = ctx.obj
    _emit(container.interviews.get_by_job_application_id(app_id))


@app.command("analytics")
def analytics_cmd(
    ctx: typer.Context,
    start: str | None = typer.Option(None, "--start"),
    end: str | None = typer.Option(None, "--end"),
) -> None:
    container: Container = ctx.obj
    try:
        date_range = DateRange(start_date=start, end_date=end)
    except PydanticValidationError as exc:
        raise typer.BadParameter(exc.errors()[0]["msg"]) from exc
    _emit(container.analytics.compute_all_analytics(date_range))


@pipeline_app.command("show")
def pipeline_show(ctx: typer.Context) -> None:
    container: Container = ctx.obj
    _emit(container.pipeline.get().map(lambda config: config.to_data()))


@pipeline_app.command("add-active")
def pipeline_add_active(ctx: typer.Context, label: str = typer.Argument(...)) -> None:
    container: Container = ctx.obj
    _emit(container.pipeline.add_active_status(label).map(lambda config: config.to_data()))


@pipeline_app.command("add-inactive")
def pipeline_add_inactive(ctx: typer.Context, label: str = typer.Argument(...)) -> None:
    container: Container = ctx.obj
    _emit(container.pipeline.add_inactive_status(label).map(lambda config: config.to_data()))


@pipeline_app.command("remove")
def pipeline_remove(ctx: typer.Context, label: str = typer.Argument(...)) -> None:
    container: Container = ctx.obj
    _emit(container.pipeline.remove_status(label).map(lambda config: config.to_data()))


@boards_app.command("list")
def boards_list(ctx: typer.Context) -> None:
    container: Container = ctx.obj
    _emit(container.boards.list_boards())


@boards_app.command("add")
def boards_add(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name"),
    url: str = typer.Option(..., "--url"),
) -> None:
    container: Container = ctx.obj
    _emit(container.boards.register(name, url))


@boards_app.command("lookup")
def boards_lookup(ctx: typer.Context, url: str = typer.Argument(...)) -> None:
    container: Container = ctx.obj
    _emit(container.boards.resolve_for_url(url))


@boards_app.command("seed")
def boards_seed(ctx: typer.Context) -> None:
    container: Container = ctx.obj
    _emit(container.boards.seed().map(lambda inserted: {"ok": True, "inserted": inserted}))


@app.command("serve")
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(None, "--host"),
    port: int | None = typer.Option(None, "--port"),
) -> None:
    container: Container = ctx.obj
    settings = container.settings
    app_instance = create_app(settings, container)
    uvicorn.run(app_instance, host=host or settings.app_host, port=port or settings.app_port)
