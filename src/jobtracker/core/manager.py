from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

from jobtracker.core.applications import JobApplication, JobApplicationCreate, JobApplicationUpdate, new_status
from jobtracker.core.clock import Clock, utc_now
from jobtracker.core.filters import filter_applications, sort_applications
from jobtracker.core.notes import Note, add_note, get_note, list_notes, remove_note, update_note
from jobtracker.core.ports import JobApplicationRepository
from jobtracker.core.result import Err, Ok, Result
from jobtracker.core.status import status_for_label
from jobtracker.types import PipelineColumn, SortDirection

logger = logging.getLogger(__name__)


class JobApplicationManager:
    """Use-cases over job applications: load, mutate the aggregate, persist."""

    def __init__(self, repository: JobApplicationRepository, id_factory: Callable[[], str], clock: Clock = utc_now):
        self.repository = repository
        self.id_factory = id_factory
        self.clock = clock

    def create(self, data: JobApplicationCreate | Mapping[str, Any]) -> Result[JobApplication, str]:
        result = self.repository.create(data)
        if result.is_ok():
            app = result.unwrap()
            logger.info("Created application %s (%s / %s)", app.id, app.company, app.position_title)
        return result

    def get(self, app_id: str) -> Result[JobApplication, str]:
        return self.repository.get_by_id(app_id)

    def list_applications(
        self,
        sort_by: PipelineColumn = "updated_at",
        direction: SortDirection = "desc",
    ) -> Result[list[JobApplication], str]:
        return self.repository.get_all().map(lambda apps: sort_applications(apps, sort_by, direction))

    def update(self, app_id: str, patch: JobApplicationUpdate | Mapping[str, Any]) -> Result[JobApplication, str]:
        return self.repository.update(app_id, patch)

    def change_status(self, app_id: str, label: str, note: str | None = None) -> Result[JobApplication, str]:
        status = status_for_label(label, note)
        if status.is_err():
            return Err(str(status.unwrap_err()))

        loaded = self.repository.get_by_id(app_id)
        if loaded.is_err():
            return loaded
        app = new_status(loaded.unwrap(), status.unwrap(), self.clock())
        saved = self.repository.save(app)
        if saved.is_ok():
            logger.info("Application %s moved to '%s'", app_id, status.unwrap().label)
        return saved

    def delete(self, app_id: str) -> Result[None, str]:
        result = self.repository.delete(app_id)
        if result.is_ok():
            logger.info("Deleted application %s", app_id)
        return result

    def clear_all(self) -> Result[None, str]:
        return self.repository.clear_all()

    def search(self, term: str | None) -> Result[list[JobApplication], str]:
        return self.list_applications().map(lambda apps: filter_applications(apps, term))

    def active(self) -> Result[list[JobApplication], str]:
        return self.repository.get_active()

    def inactive(self) -> Result[list[JobApplication], str]:
        return self.repository.get_inactive()

    def overdue(self, now: datetime | None = None) -> Result[list[JobApplication], str]:
        return self.repository.get_overdue(now or self.clock())

    def list_notes(self, app_id: str) -> Result[list[Note], str]:
        return self.get(app_id).map(list_notes)

    def get_note(self, app_id: str, note_id: str) -> Result[Note, str]:
        return self.get(app_id).and_then(lambda app: get_note(app, note_id).map_err(str))

    def add_note(self, app_id: str, content: str) -> Result[Note, str]:
        return self._mutate_note(app_id, lambda app: add_note(app, content, self.id_factory, self.clock()))

    def update_note(self, app_id: str, note_id: str, content: str) -> Result[Note, str]:
        return self._mutate_note(app_id, lambda app: update_note(app, note_id, content, self.clock()))

    def remove_note(self, app_id: str, note_id: str) -> Result[None, str]:
        return self._mutate_note(app_id, lambda app: remove_note(app, note_id, self.clock()))

    def _mutate_note(self, app_id: str, operation: Callable[[JobApplication], Result[Any, Any]]) -> Result[Any, str]:
        loaded = self.get(app_id)
        if loaded.is_err():
            return loaded
        app = loaded.unwrap()
        outcome = operation(app)
        if outcome.is_err():
            return Err(str(outcome.unwrap_err()))
        return self.repository.save(app).and_then(lambda _: Ok(outcome.unwrap()))
