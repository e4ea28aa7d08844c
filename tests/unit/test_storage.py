from __future__ import annotations

from pathlib import Path

from jobtracker.core.pipeline import PipelineConfig
from jobtracker.storage.json_file import JsonFileDocumentStore, JsonPipelineConfigRepository
from jobtracker.storage.memory import MemoryDocumentStore
from jobtracker.storage.repositories import DocumentJobApplicationRepository

APP = {"company": "Acme", "position_title": "Dev", "application_date": "2024-01-01"}


def test_application_crud_on_every_backend(any_container) -> None:
    repo = any_container.applications
    created = repo.create(APP).unwrap()
    assert repo.get_by_id(created.id).unwrap() == created

    updated = repo.update(created.id, {"interest_rating": 2, "next_event_date": "2024-02-01"}).unwrap()
    assert updated.interest_rating == 2
    assert repo.get_by_id(created.id).unwrap().interest_rating == 2
    assert updated.updated_at > created.updated_at

    assert [app.id for app in repo.get_all().unwrap()] == [created.id]
    assert repo.delete(created.id).is_ok()
    assert repo.get_by_id(created.id).unwrap_err() == f"job application not found: {created.id}"
    assert repo.delete(created.id).unwrap_err() == f"job application not found: {created.id}"


def test_cleared_fields_stay_cleared_after_reload(any_container, clock) -> None:
    repo = any_container.applications
    created = repo.create({**APP, "interest_rating": 2, "next_event_date": "2024-02-01"}).unwrap()
    assert [app.id for app in repo.get_overdue(clock()).unwrap()] == [created.id]

    repo.update(created.id, {"interest_rating": None, "next_event_date": ""}).unwrap()
    reloaded = repo.get_by_id(created.id).unwrap()
    assert reloaded.interest_rating is None
    assert reloaded.next_event_date is None
    assert repo.get_overdue(clock()).unwrap() == []

    contact = any_container.contacts.create(
        {
            "job_application_id": created.id,
            "contact_name": "Pat",
            "contact_email": "pat@example.com",
            "role": "recruiter",
            "outreach_date": "2024-01-02",
        }
    ).unwrap()
    any_container.contacts.update(contact.id, {"role": None, "contact_email": ""}).unwrap()
    reloaded_contact = any_container.contacts.get_by_id(contact.id).unwrap()
    assert reloaded_contact.role is None
    assert reloaded_contact.contact_email is None

    stage = any_container.interviews.create(
        {"job_application_id": created.id, "round": 1, "interview_type": "technical", "completed_date": "2024-01-09"}
    ).unwrap()
    any_container.interviews.update(stage.id, {"completed_date": None}).unwrap()
    assert any_container.interviews.get_by_id(stage.id).unwrap().completed_date is None


def test_invalid_create_is_reported_not_stored(any_container) -> None:
    error = any_container.applications.create({**APP, "company": ""}).unwrap_err()
    assert error.startswith("Failed to create job application: company")
    assert any_container.applications.get_all().unwrap() == []


def test_clear_all_and_derived_queries(any_container, clock) -> None:
    manager = any_container.manager
    first = manager.create({**APP, "next_event_date": "2024-02-01"}).unwrap()
    second = manager.create({**APP, "company": "Globex"}).unwrap()
    manager.change_status(second.id, "rejected").unwrap()

    assert [app.id for app in any_container.applications.get_active().unwrap()] == [first.id]
    assert [app.id for app in any_container.applications.get_inactive().unwrap()] == [second.id]
    assert [app.id for app in any_container.applications.get_overdue(clock()).unwrap()] == [first.id]

    assert manager.clear_all().is_ok()
    assert manager.list_applications().unwrap() == []


def test_child_entities_on_every_backend(any_container) -> None:
    app = any_container.manager.create(APP).unwrap()
    contact = any_container.contacts.create(
        {"job_application_id": app.id, "contact_name": "Pat", "outreach_date": "2024-01-02"}
    ).unwrap()
    later = any_container.interviews.create({"job_application_id": app.id, "round": 2, "interview_type": "onsite"}).unwrap()
    first = any_container.interviews.create(
        {"job_application_id": app.id, "round": 1, "interview_type": "phone screening", "questions": []}
    ).unwrap()

    assert any_container.contacts.get_by_job_application_id(app.id).unwrap() == [contact]
    assert any_container.contacts.get_by_job_application_id("other").unwrap() == []
    assert [s.id for s in any_container.interviews.get_by_job_application_id(app.id).unwrap()] == [first.id, later.id]

    responded = any_container.contacts.update(contact.id, {"response_received": True}).unwrap()
    assert any_container.contacts.get_by_id(contact.id).unwrap() == responded
    assert any_container.interviews.update(first.id, {"notes": "went well"}).unwrap().notes == "went well"
    assert any_container.contacts.delete("missing").unwrap_err() == "contact not found: missing"


def test_job_board_seed_is_idempotent(any_container) -> None:
    boards = any_container.job_boards
    assert len(boards.get_all().unwrap()) == 8
    assert boards.seed_common_boards().unwrap() == 0
    assert boards.find_by_domain("www.indeed.com").unwrap().name == "Indeed"
    assert boards.create({"name": "LinkedIn again", "root_domain": "linkedin.com"}).is_err()
    names = [board.name for board in boards.get_all().unwrap()]
    assert names == sorted(names, key=str.lower)


def test_memory_store_hands_out_copies() -> None:
    store = MemoryDocumentStore()
    store.put({"id": "a", "tags": ["x"]})
    fetched = store.get("a")
    fetched["tags"].append("y")
    assert store.get("a") == {"id": "a", "tags": ["x"]}
    assert store.delete("a") is True
    assert store.delete("a") is False


def test_json_sections_share_one_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    apps = JsonFileDocumentStore(path, "job_applications")
    contacts = JsonFileDocumentStore(path, "contacts")
    apps.put({"id": "a"})
    contacts.put({"id": "c"})
    apps.put({"id": "a", "company": "Acme"})
    assert apps.all() == [{"id": "a", "company": "Acme"}]
    assert contacts.all() == [{"id": "c"}]
    contacts.clear()
    assert apps.get("a") == {"id": "a", "company": "Acme"}
    assert contacts.all() == []


def test_corrupt_json_surfaces_as_read_failure(tmp_path: Path, ids, clock) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    repo = DocumentJobApplicationRepository(JsonFileDocumentStore(path, "job_applications"), ids, clock)
    assert repo.get_all().unwrap_err().startswith("Failed to read job application")
    assert repo.create(APP).unwrap_err().startswith("Failed to save job application")


def test_pipeline_config_persists_to_json(tmp_path: Path) -> None:
    path = tmp_path / "pipeline.json"
    repo = JsonPipelineConfigRepository(path)
    assert repo.load().unwrap() == PipelineConfig.default()

    config = PipelineConfig(active=["applied", "final round"], inactive=["rejected"])
    assert repo.save(config).is_ok()
    assert JsonPipelineConfigRepository(path).load().unwrap() == config

    path.write_text('{"active": [], "inactive": ["rejected"]}', encoding="utf-8")
    assert repo.load().unwrap_err().startswith("Failed to load pipeline configuration")
