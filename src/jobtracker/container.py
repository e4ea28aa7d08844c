"""
Explicit dependency registry.

One ``Container`` is built per process (or per test) from a ``Settings``
object; nothing in the package keeps module-level state.
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy import Engine

from jobtracker.config import Settings
from jobtracker.core.analytics import AnalyticsAggregator
from jobtracker.core.clock import Clock, utc_now
from jobtracker.core.manager import JobApplicationManager
from jobtracker.core.ports import (
    ContactRepository,
    InterviewStageRepository,
    JobApplicationRepository,
    JobBoardRepository,
    PipelineConfigRepository,
)
from jobtracker.core.services import JobBoardService, PipelineConfigService
from jobtracker.db.init import ensure_data_directories, init_database
from jobtracker.db.models import ContactRecord, InterviewStageRecord, JobApplicationRecord, JobBoardRecord
from jobtracker.db.repositories import SqlAlchemyDocumentStore
from jobtracker.db.session import build_engine, build_session_factory
from jobtracker.storage.base import DocumentStore
from jobtracker.storage.json_file import JsonFileDocumentStore, JsonPipelineConfigRepository
from jobtracker.storage.memory import MemoryDocumentStore, MemoryPipelineConfigRepository
from jobtracker.storage.repositories import (
    DocumentContactRepository,
    DocumentInterviewStageRepository,
    DocumentJobApplicationRepository,
    DocumentJobBoardRepository,
)

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


@dataclass(slots=True)
class Container:
    settings: Settings
    applications: JobApplicationRepository
    contacts: ContactRepository
    interviews: InterviewStageRepository
    job_boards: JobBoardRepository
    pipeline_config: PipelineConfigRepository
    clock: Clock = utc_now
    id_factory: Callable[[], str] = new_id
    engine: Engine | None = None
    manager: JobApplicationManager = field(init=False)
    pipeline: PipelineConfigService = field(init=False)
    boards: JobBoardService = field(init=False)
    analytics: AnalyticsAggregator = field(init=False)

    def __post_init__(self) -> None:
        self.manager = JobApplicationManager(self.applications, self.id_factory, self.clock)
        self.pipeline = PipelineConfigService(self.pipeline_config)
        self.boards = JobBoardService(self.job_boards)
        self.analytics = AnalyticsAggregator(self.applications, self.contacts, self.interviews, self.clock)

    def bootstrap(self) -> None:
        """Create storage locations and schema, then seed job boards."""
        if self.settings.storage_backend != "memory":
            ensure_data_directories(self.settings)
        if self.engine is not None:
            init_database(self.engine)
        if self.settings.seed_job_boards:
            seeded = self.job_boards.seed_common_boards()
            if seeded.is_err():
                logger.warning("Job board seeding failed: %s", seeded.unwrap_err())

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def _stores(settings: Settings) -> tuple[dict[str, DocumentStore], Engine | None]:
    sections = ("job_applications", "contacts", "interview_stages", "job_boards")
    if settings.storage_backend == "memory":
        return {name: MemoryDocumentStore() for name in sections}, None
    if settings.storage_backend == "json":
        return {name: JsonFileDocumentStore(settings.json_store_path, name) for name in sections}, None

    engine = build_engine(settings)
    session_factory = build_session_factory(engine)
    models = (JobApplicationRecord, ContactRecord, InterviewStageRecord, JobBoardRecord)
    return {name: SqlAlchemyDocumentStore(session_factory, model) for name, model in zip(sections, models)}, engine


def build_container(
    settings: Settings,
    clock: Clock = utc_now,
    id_factory: Callable[[], str] = new_id,
) -> Container:
    stores, engine = _stores(settings)
    pipeline_config: PipelineConfigRepository
    if settings.storage_backend == "memory":
        pipeline_config = MemoryPipelineConfigRepository()
    else:
        pipeline_config = JsonPipelineConfigRepository(settings.pipeline_config_path)

    logger.info("Using %s storage (%s environment)", settings.storage_backend, settings.app_env)
    return Container(
        settings=settings,
        applications=DocumentJobApplicationRepository(stores["job_applications"], id_factory, clock),
        contacts=DocumentContactRepository(stores["contacts"], id_factory, clock),
        interviews=DocumentInterviewStageRepository(stores["interview_stages"], id_factory, clock),
        job_boards=DocumentJobBoardRepository(stores["job_boards"], id_factory, clock),
        pipeline_config=pipeline_config,
        clock=clock,
        id_factory=id_factory,
        engine=engine,
    )
