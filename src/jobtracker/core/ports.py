"""
Storage ports.

Every method returns a ``Result`` whose error side is a plain message;
adapters never let storage exceptions escape.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from jobtracker.core.applications import JobApplication, JobApplicationCreate, JobApplicationUpdate, is_overdue
from jobtracker.core.contacts import Contact, ContactCreate, ContactUpdate
from jobtracker.core.interviews import InterviewStage, InterviewStageCreate, InterviewStageUpdate
from jobtracker.core.job_boards import JobBoard, JobBoardCreate
from jobtracker.core.pipeline import PipelineConfig
from jobtracker.core.result import Result
from jobtracker.core.status import is_active, is_inactive


class JobApplicationRepository(ABC):
    @abstractmethod
    def create(self, data: JobApplicationCreate | Mapping[str, Any]) -> Result[JobApplication, str]:
        """Create an application seeded with the initial ``applied`` status."""

    @abstractmethod
    def get_by_id(self, app_id: str) -> Result[JobApplication, str]: ...

    @abstractmethod
    def get_all(self) -> Result[list[JobApplication], str]: ...

    @abstractmethod
    def update(self, app_id: str, patch: JobApplicationUpdate | Mapping[str, Any]) -> Result[JobApplication, str]: ...

    @abstractmethod
    def save(self, app: JobApplication) -> Result[JobApplication, str]:
        """Persist an aggregate that was mutated in memory."""

    @abstractmethod
    def delete(self, app_id: str) -> Result[None, str]: ...

    @abstractmethod
    def clear_all(self) -> Result[None, str]: ...

    def get_active(self) -> Result[list[JobApplication], str]:
        return self.get_all().map(lambda apps: [app for app in apps if is_active(app)])

    def get_inactive(self) -> Result[list[JobApplication], str]:
        return self.get_all().map(lambda apps: [app for app in apps if is_inactive(app)])

    def get_overdue(self, now: datetime | None = None) -> Result[list[JobApplication], str]:
        return self.get_all().map(lambda apps: [app for app in apps if is_overdue(app, now)])


class ContactRepository(ABC):
    @abstractmethod
    def create(self, data: ContactCreate | Mapping[str, Any]) -> Result[Contact, str]: ...

    @abstractmethod
    def get_by_id(self, contact_id: str) -> Result[Contact, str]: ...

    @abstractmethod
    def get_all(self) -> Result[list[Contact], str]: ...

    @abstractmethod
    def get_by_job_application_id(self, app_id: str) -> Result[list[Contact], str]: ...

    @abstractmethod
    def update(self, contact_id: str, patch: ContactUpdate | Mapping[str, Any]) -> Result[Contact, str]: ...

    @abstractmethod
    def delete(self, contact_id: str) -> Result[None, str]: ...


class InterviewStageRepository(ABC):
    @abstractmethod
    def create(self, data: InterviewStageCreate | Mapping[str, Any]) -> Result[InterviewStage, str]: ...

    @abstractmethod
    def get_by_id(self, stage_id: str) -> Result[InterviewStage, str]: ...

    @abstractmethod
    def get_all(self) -> Result[list[InterviewStage], str]: ...

    @abstractmethod
    def get_by_job_application_id(self, app_id: str) -> Result[list[InterviewStage], str]:
        """Stages of one application ordered by round."""

    @abstractmethod
    def update(
        self, stage_id: str, patch: InterviewStageUpdate | Mapping[str, Any]
    ) -> Result[InterviewStage, str]: ...

    @abstractmethod
    def save(self, stage: InterviewStage) -> Result[InterviewStage, str]: ...

    @abstractmethod
    def delete(self, stage_id: str) -> Result[None, str]: ...


class JobBoardRepository(ABC):
    @abstractmethod
    def create(self, data: JobBoardCreate | Mapping[str, Any]) -> Result[JobBoard, str]:
        """Fails when the root domain already belongs to a stored board."""

    @abstractmethod
    def get_by_id(self, board_id: str) -> Result[JobBoard, str]: ...

    @abstractmethod
    def get_all(self) -> Result[list[JobBoard], str]:
        """All boards sorted by name."""

    @abstractmethod
    def find_by_domain(self, domain: str) -> Result[JobBoard | None, str]: ...

    @abstractmethod
    def delete(self, board_id: str) -> Result[None, str]: ...

    @abstractmethod
    def seed_common_boards(self) -> Result[int, str]:
        """Insert the common boards not stored yet; returns how many were added."""


class PipelineConfigRepository(ABC):
    @abstractmethod
    def load(self) -> Result[PipelineConfig, str]:
        """Stored config, or the default one when nothing was saved."""

    @abstractmethod
    def save(self, config: PipelineConfig) -> Result[None, str]: ...
