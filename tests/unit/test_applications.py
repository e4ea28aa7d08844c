from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.applications import (
    JobApplication,
    create_job_application,
    create_job_application_with_initial_status,
    is_overdue,
    new_status,
    update_job_application,
)
from jobtracker.core.errors import ValidationError
from jobtracker.core.status import ActiveStatus, InactiveStatus, current_status

NOW = datetime(2024, 1, 1, tzinfo=UTC)
BASE = {"company": "  Acme  ", "position_title": "Dev", "application_date": "2024-01-01T00:00:00.000Z"}


def _create(**overrides) -> JobApplication:
    return create_job_application_with_initial_status({**BASE, **overrides}, lambda: "app-1", NOW).unwrap()


def test_create_trims_and_seeds_applied_status() -> None:
    app = _create()
    assert app.company == "Acme"
    assert app.created_at == app.updated_at == "2024-01-01T00:00:00.000Z"
    assert len(app.status_log) == 1
    assert app.status_log[0].timestamp == app.created_at
    assert app.status_log[0].status == ActiveStatus(label="applied")
    assert app.source_type == "other"
    assert app.is_remote is False


def test_plain_create_has_empty_log() -> None:
    app = create_job_application(BASE, lambda: "app-1", NOW).unwrap()
    assert app.status_log == []
    assert app.notes == []


def test_new_status_becomes_current() -> None:
    app = _create()
    new_status(app, InactiveStatus(label="rejected"), NOW)
    assert current_status(app).unwrap() == InactiveStatus(label="rejected")
    assert len(app.status_log) == 2


def test_mutations_strictly_increase_updated_at() -> None:
    app = _create()
    stamps = [app.updated_at]
    new_status(app, ActiveStatus(label="screening interview"), NOW)
    stamps.append(app.updated_at)
    update_job_application(app, {"interest_rating": 3}, NOW).unwrap()
    stamps.append(app.updated_at)
    new_status(app, ActiveStatus(label="interview"), NOW)
    stamps.append(app.updated_at)

    assert stamps == sorted(set(stamps))
    assert stamps[-1] == "2024-01-01T00:00:00.003Z"
    assert [entry.timestamp for entry in app.status_log] == sorted(entry.timestamp for entry in app.status_log)


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("company", "   "),
        ("position_title", ""),
        ("application_date", "not a date"),
        ("interest_rating", 4),
        ("interest_rating", "high"),
        ("source_type", "carrier pigeon"),
    ],
)
def test_create_rejects_invalid_fields(field: str, value: object) -> None:
    error = create_job_application({**BASE, field: value}, lambda: "app-1", NOW).unwrap_err()
    assert isinstance(error, ValidationError)
    assert error.field == field


def test_interest_rating_accepts_form_strings() -> None:
    assert _create(interest_rating="2").interest_rating == 2
    assert _create(interest_rating="").interest_rating is None


def test_update_applies_only_given_fields_and_blank_clears() -> None:
    app = _create(next_event_date="2024-02-01", source_notes="via a friend")
    update_job_application(app, {"next_event_date": "", "position_title": " Senior Dev "}, NOW).unwrap()
    assert app.next_event_date is None
    assert app.position_title == "Senior Dev"
    assert app.source_notes == "via a friend"
    assert app.created_at == "2024-01-01T00:00:00.000Z"


def test_update_cannot_touch_status_log_or_identity() -> None:
    app = _create()
    for patch in ({"status_log": []}, {"id": "other"}, {"created_at": "2020-01-01"}):
        assert isinstance(update_job_application(app, patch, NOW).unwrap_err(), ValidationError)
    assert app.id == "app-1"
    assert len(app.status_log) == 1


def test_failed_update_leaves_application_unchanged() -> None:
    app = _create()
    before = app.model_copy(deep=True)
    assert update_job_application(app, {"company": ""}, NOW).is_err()
    assert app == before


def test_loaded_status_log_is_sorted_chronologically() -> None:
    document = {
        **BASE,
        "id": "app-1",
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-05T00:00:00.000Z",
        "status_log": [
            ["2024-01-05T00:00:00.000Z", {"category": "inactive", "label": "rejected"}],
            ["2024-01-01T00:00:00.000Z", {"category": "active", "label": "applied"}],
            ["2024-01-03T00:00:00.000Z", {"category": "active", "label": "interview"}],
        ],
    }
    app = JobApplication.model_validate(document)
    assert [entry.status.label for entry in app.status_log] == ["applied", "interview", "rejected"]
    assert current_status(app).unwrap().label == "rejected"


def test_duplicate_log_timestamps_are_rejected() -> None:
    document = {
        **BASE,
        "id": "app-1",
        "created_at": "2024-01-01T00:00:00.000Z",
        "updated_at": "2024-01-01T00:00:00.000Z",
        "status_log": [
            ["2024-01-01T00:00:00.000Z", {"category": "active", "label": "applied"}],
            ["2024-01-01T00:00:00.000Z", {"category": "active", "label": "offer"}],
        ],
    }
    with pytest.raises(PydanticValidationError):
        JobApplication.model_validate(document)


def test_updated_at_cannot_precede_created_at() -> None:
    with pytest.raises(PydanticValidationError):
        JobApplication(**BASE, id="app-1", created_at="2024-01-02", updated_at="2024-01-01")


def test_document_round_trip_preserves_entity() -> None:
    app = _create(interest_rating=2, job_posting_url="https://example.com/job")
    new_status(app, ActiveStatus(label="offer", note="verbal"), NOW)
    assert JobApplication.model_validate(app.to_document()) == app
    assert "next_event_date" not in app.to_document()


def test_is_overdue() -> None:
    now = datetime(2024, 6, 1, tzinfo=UTC)
    yesterday = (now - timedelta(days=1)).isoformat()
    tomorrow = (now + timedelta(days=1)).isoformat()
    assert is_overdue(_create(next_event_date=yesterday), now) is True
    assert is_overdue(_create(next_event_date=tomorrow), now) is False
    assert is_overdue(_create(), now) is False
