from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from jobtracker.core.applications import JobApplication
from jobtracker.core.status import current_status
from jobtracker.types import PipelineColumn, SortDirection


def status_label(app: JobApplication) -> str:
    return current_status(app).map(lambda status: status.label).unwrap_or("")


def filter_applications(applications: Sequence[JobApplication], term: str | None) -> list[JobApplication]:
    """Case-insensitive match on company, position, current status and posting URL."""
    needle = (term or "").strip().lower()
    if not needle:
        return list(applications)

    def matches(app: JobApplication) -> bool:
        haystack = (app.company, app.position_title, status_label(app), app.job_posting_url or "")
        return any(needle in value.lower() for value in haystack)

    return [app for app in applications if matches(app)]


SORT_KEYS: dict[PipelineColumn, Callable[[JobApplication], Any]] = {
    "company": lambda app: app.company.lower(),
    "position_title": lambda app: app.position_title.lower(),
    "application_date": lambda app: app.application_date,
    "interest_rating": lambda app: app.interest_rating,
    "next_event_date": lambda app: app.next_event_date,
    "status": status_label,
    "updated_at": lambda app: app.updated_at,
}


def sort_applications(
    applications: Sequence[JobApplication],
    column: PipelineColumn = "updated_at",
    direction: SortDirection = "desc",
) -> list[JobApplication]:
    """Sort by ``column``; applications without a value always come last."""
    key = SORT_KEYS[column]
    present = [app for app in applications if key(app) is not None]
    missing = [app for app in applications if key(app) is None]
    return sorted(present, key=key, reverse=direction == "desc") + missing
