from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.applications import create_job_application, new_status
from jobtracker.core.errors import NotFoundError, ValidationError
from jobtracker.core.status import (
    ActiveStatus,
    InactiveStatus,
    current_status,
    has_status,
    is_active,
    is_inactive,
    status_for_label,
)

START = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


def _app():
    data = {"company": "Acme", "position_title": "Dev", "application_date": "2024-01-01"}
    return create_job_application(data, lambda: "app-1", START).unwrap()


def test_status_for_label_normalizes_and_categorizes() -> None:
    assert status_for_label(" Offer ").unwrap() == ActiveStatus(label="offer")
    assert status_for_label("no response", "ghosted").unwrap() == InactiveStatus(label="no response", note="ghosted")


def test_status_for_label_rejects_unknown_label() -> None:
    error = status_for_label("daydreaming").unwrap_err()
    assert isinstance(error, ValidationError)
    assert error.field == "status"


def test_label_must_belong_to_its_category() -> None:
    with pytest.raises(PydanticValidationError):
        InactiveStatus(label="applied")
    with pytest.raises(PydanticValidationError):
        ActiveStatus(label="rejected")


def test_application_without_log_has_no_current_status() -> None:
    app = _app()
    assert not has_status(app)
    assert isinstance(current_status(app).unwrap_err(), NotFoundError)
    assert not is_active(app)
    assert not is_inactive(app)


def test_category_follows_latest_entry() -> None:
    app = _app()
    new_status(app, ActiveStatus(label="interview"), START)
    assert is_active(app)
    new_status(app, InactiveStatus(label="hiring freeze"), START)
    assert is_inactive(app)
    assert current_status(app).unwrap().label == "hiring freeze"
