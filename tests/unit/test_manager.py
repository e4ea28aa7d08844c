from __future__ import annotations

import uuid

from jobtracker.config import Settings
from jobtracker.container import build_container, new_id
from jobtracker.core.status import current_status

APP = {"company": "Acme", "position_title": "Backend Engineer", "application_date": "2024-01-01"}


def test_change_status_appends_and_persists(memory_container) -> None:
    manager = memory_container.manager
    app = manager.create(APP).unwrap()

    moved = manager.change_status(app.id, "Interview", "with the team lead").unwrap()
    reloaded = manager.get(app.id).unwrap()
    assert reloaded == moved
    assert [entry.status.label for entry in reloaded.status_log] == ["applied", "interview"]
    assert current_status(reloaded).unwrap().note == "with the team lead"


def test_change_status_errors(memory_container) -> None:
    manager = memory_container.manager
    app = manager.create(APP).unwrap()
    assert manager.change_status(app.id, "on vacation").unwrap_err() == "status: unknown status label 'on vacation'"
    assert manager.change_status("missing", "offer").unwrap_err() == "job application not found: missing"
    assert len(manager.get(app.id).unwrap().status_log) == 1


def test_note_lifecycle_through_manager(memory_container) -> None:
    manager = memory_container.manager
    app = manager.create(APP).unwrap()

    note = manager.add_note(app.id, "Recruiter said two weeks").unwrap()
    assert manager.get_note(app.id, note.id).unwrap() == note
    assert manager.update_note(app.id, note.id, "Recruiter said three weeks").unwrap().content == "Recruiter said three weeks"
    assert [n.content for n in manager.list_notes(app.id).unwrap()] == ["Recruiter said three weeks"]

    assert manager.add_note(app.id, " ").is_err()
    assert manager.remove_note(app.id, "missing").unwrap_err() == "note not found: missing"
    assert manager.remove_note(app.id, note.id).is_ok()
    assert manager.list_notes(app.id).unwrap() == []


def test_search_and_sorted_listing(memory_container, clock) -> None:
    manager = memory_container.manager
    first = manager.create(APP).unwrap()
    clock.advance(minutes=1)
    second = manager.create({**APP, "company": "Globex", "position_title": "Analyst"}).unwrap()

    assert [app.id for app in manager.list_applications().unwrap()] == [second.id, first.id]
    assert [app.id for app in manager.list_applications("company", "asc").unwrap()] == [first.id, second.id]
    assert [app.id for app in manager.search("engineer").unwrap()] == [first.id]


def test_overdue_uses_container_clock(memory_container, clock) -> None:
    manager = memory_container.manager
    due = manager.create({**APP, "next_event_date": "2024-03-02"}).unwrap()
    assert manager.overdue().unwrap() == []
    clock.advance(days=2)
    assert [app.id for app in manager.overdue().unwrap()] == [due.id]


def test_created_ids_are_fresh_uuids() -> None:
    settings = Settings(_env_file=None, app_env="test", storage_backend="memory", seed_job_boards=False)
    container = build_container(settings)
    created = [container.manager.create(APP).unwrap() for _ in range(20)]
    ids = {app.id for app in created}

    assert len(ids) == len(created)
    assert all(uuid.UUID(app_id).version == 4 for app_id in ids)
    contact = container.contacts.create(
        {"job_application_id": created[0].id, "contact_name": "Pat", "outreach_date": "2024-01-02"}
    ).unwrap()
    assert contact.id not in ids
    assert container.id_factory is new_id
