"""
Repository adapters over a ``DocumentStore``.

The same classes back the SQLite, JSON-file and in-memory configurations;
only the store differs.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from jobtracker.core.applications import (
    JobApplication,
    JobApplicationCreate,
    JobApplicationUpdate,
    create_job_application_with_initial_status,
    update_job_application,
)
from jobtracker.core.clock import Clock, utc_now
from jobtracker.core.contacts import Contact, ContactCreate, ContactUpdate, create_contact, update_contact
from jobtracker.core.errors import NotFoundError, StorageError
from jobtracker.core.interviews import (
    InterviewStage,
    InterviewStageCreate,
    InterviewStageUpdate,
    create_interview_stage,
    update_interview_stage,
)
from jobtracker.core.job_boards import COMMON_JOB_BOARDS, JobBoard, JobBoardCreate, create_job_board, find_board
from jobtracker.core.ports import (
    ContactRepository,
    InterviewStageRepository,
    JobApplicationRepository,
    JobBoardRepository,
)
from jobtracker.core.result import Err, Ok, Result
from jobtracker.storage.base import DocumentStore

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
T = TypeVar("T")


class DocumentRepository:
    resource = "document"

    def __init__(self, store: DocumentStore, id_factory: Callable[[], str], clock: Clock = utc_now):
        self.store = store
        self.id_factory = id_factory
        self.clock = clock

    def _run(self, action: str, operation: Callable[[], T]) -> Result[T, str]:
        try:
            return Ok(operation())
        except (StorageError, PydanticValidationError) as exc:
            logger.warning("Failed to %s %s: %s", action, self.resource, exc)
            return Err(f"Failed to {action} {self.resource}: {exc}")

    def _load(self, model: type[ModelT], key: str) -> Result[ModelT, str]:
        result = self._run("read", lambda: self.store.get(key))
        if result.is_err():
            return result
        document = result.unwrap()
        if document is None:
            return Err(str(NotFoundError(self.resource, key)))
        return self._run("decode", lambda: model.model_validate(document))

    def _load_all(self, model: type[ModelT]) -> Result[list[ModelT], str]:
        return self._run("read", lambda: [model.model_validate(doc) for doc in self.store.all()])

    def _store(self, entity: ModelT) -> Result[ModelT, str]:
        def write() -> ModelT:
            self.store.put(entity.to_document())
            return entity

        return self._run("save", write)

    def _delete(self, key: str) -> Result[None, str]:
        result = self._run("delete", lambda: self.store.delete(key))
        if result.is_err():
            return result
        if not result.unwrap():
            return Err(str(NotFoundError(self.resource, key)))
        return Ok(None)


class DocumentJobApplicationRepository(DocumentRepository, JobApplicationRepository):
    resource = "job application"

    def create(self, data: JobApplicationCreate | Mapping[str, Any]) -> Result[JobApplication, str]:
        created = create_job_application_with_initial_status(data, self.id_factory, self.clock())
        if created.is_err():
            return Err(f"Failed to create job application: {created.unwrap_err()}")
        return self._store(created.unwrap())

    def get_by_id(self, app_id: str) -> Result[JobApplication, str]:
        return self._load(JobApplication, app_id)

    def get_all(self) -> Result[list[JobApplication], str]:
        return self._load_all(JobApplication)

    def update(self, app_id: str, patch: JobApplicationUpdate | Mapping[str, Any]) -> Result[JobApplication, str]:
        def apply(app: JobApplication) -> Result[JobApplication, str]:
            return update_job_application(app, patch, self.clock()).map_err(
                lambda exc: f"Failed to update job application: {exc}"
            )

        return self.get_by_id(app_id).and_then(apply).and_then(self._store)

    def save(self, app: JobApplication) -> Result[JobApplication, str]:
        return self._store(app)

    def delete(self, app_id: str) -> Result[None, str]:
        return self._delete(app_id)

    def clear_all(self) -> Result[None, str]:
        return self._run("clear", self.store.clear)


class DocumentContactRepository(DocumentRepository, ContactRepository):
    resource = "contact"

    def create(self, data: ContactCreate | Mapping[str, Any]) -> Result[Contact, str]:
        created = create_contact(data, self.id_factory, self.clock())
        if created.is_err():
            return Err(f"Failed to create contact: {created.unwrap_err()}")
        return self._store(created.unwrap())

    def get_by_id(self, contact_id: str) -> Result[Contact, str]:
        return self._load(Contact, contact_id)

    def get_all(self) -> Result[list[Contact], str]:
        return self._load_all(Contact)

    def get_by_job_application_id(self, app_id: str) -> Result[list[Contact], str]:
        return self.get_all().map(lambda contacts: [c for c in contacts if c.job_application_id == app_id])

    def update(self, contact_id: str, patch: ContactUpdate | Mapping[str, Any]) -> Result[Contact, str]:
        def apply(contact: Contact) -> Result[Contact, str]:
            return update_contact(contact, patch, self.clock()).map_err(lambda exc: f"Failed to update contact: {exc}")

        return self.get_by_id(contact_id).and_then(apply).and_then(self._store)

    def delete(self, contact_id: str) -> Result[None, str]:
        return self._delete(contact_id)


class DocumentInterviewStageRepository(DocumentRepository, InterviewStageRepository):
    resource = "interview stage"

    def create(self, data: InterviewStageCreate | Mapping[str, Any]) -> Result[InterviewStage, str]:
        created = create_interview_stage(data, self.id_factory, self.clock())
        if created.is_err():
            return Err(f"Failed to create interview stage: {created.unwrap_err()}")
        return self._store(created.unwrap())

    def get_by_id(self, stage_id: str) -> Result[InterviewStage, str]:
        return self._load(InterviewStage, stage_id)

    def get_all(self) -> Result[list[InterviewStage], str]:
        return self._load_all(InterviewStage)

    def get_by_job_application_id(self, app_id: str) -> Result[list[InterviewStage], str]:
        def select(stages: list[InterviewStage]) -> list[InterviewStage]:
            return sorted((s for s in stages if s.job_application_id == app_id), key=lambda s: s.round)

        return self.get_all().map(select)

    def update(
        self, stage_id: str, patch: InterviewStageUpdate | Mapping[str, Any]
    ) -> Result[InterviewStage, str]:
        def apply(stage: InterviewStage) -> Result[InterviewStage, str]:
            return update_interview_stage(stage, patch, self.clock()).map_err(
                lambda exc: f"Failed to update interview stage: {exc}"
            )

        return self.get_by_id(stage_id).and_then(apply).and_then(self._store)

    def save(self, stage: InterviewStage) -> Result[InterviewStage, str]:
        return self._store(stage)

    def delete(self, stage_id: str) -> Result[None, str]:
        return self._delete(stage_id)


class DocumentJobBoardRepository(DocumentRepository, JobBoardRepository):
    resource = "job board"

    def create(self, data: JobBoardCreate | Mapping[str, Any]) -> Result[JobBoard, str]:
        created = create_job_board(data, self.id_factory, self.clock())
        if created.is_err():
            return Err(f"Failed to create job board: {created.unwrap_err()}")
        board = created.unwrap()

        existing = self.find_by_domain(board.root_domain)
        if existing.is_err():
            return existing
        if existing.unwrap() is not None:
            return Err(f"Failed to create job board: {board.root_domain} is already registered")
        return self._store(board)

    def get_by_id(self, board_id: str) -> Result[JobBoard, str]:
        return self._load(JobBoard, board_id)

    def get_all(self) -> Result[list[JobBoard], str]:
        return self._load_all(JobBoard).map(lambda boards: sorted(boards, key=lambda b: b.name.lower()))

    def find_by_domain(self, domain: str) -> Result[JobBoard | None, str]:
        return self._load_all(JobBoard).map(lambda boards: find_board(boards, domain))

    def delete(self, board_id: str) -> Result[None, str]:
        return self._delete(board_id)

    def seed_common_boards(self) -> Result[int, str]:
        inserted = 0
        for data in COMMON_JOB_BOARDS:
            existing = self.find_by_domain(data["root_domain"])
            if existing.is_err():
                return existing
            if existing.unwrap() is not None:
                continue
            created = self.create(data)
            if created.is_err():
                return created
            inserted += 1
        if inserted:
            logger.info("Seeded %s job boards", inserted)
        return Ok(inserted)
