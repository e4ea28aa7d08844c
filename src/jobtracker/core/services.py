from __future__ import annotations

import logging
from collections.abc import Callable

from jobtracker.core.job_boards import JobBoard, domain_from_url
from jobtracker.core.pipeline import PipelineConfig
from jobtracker.core.ports import JobBoardRepository, PipelineConfigRepository
from jobtracker.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class PipelineConfigService:
    def __init__(self, repository: PipelineConfigRepository):
        self.repository = repository

    def get(self) -> Result[PipelineConfig, str]:
        return self.repository.load()

    def update(self, config: PipelineConfig) -> Result[None, str]:
        return self.repository.save(config)

    def _change(self, change: Callable[[PipelineConfig], Result[None, object]]) -> Result[PipelineConfig, str]:
        loaded = self.repository.load()
        if loaded.is_err():
            return loaded
        config = loaded.unwrap()
        changed = change(config)
        if changed.is_err():
            return Err(str(changed.unwrap_err()))
        return self.repository.save(config).map(lambda _: config)

    def add_active_status(self, label: str) -> Result[PipelineConfig, str]:
        return self._change(lambda config: config.add_active_status(label))

    def add_inactive_status(self, label: str) -> Result[PipelineConfig, str]:
        return self._change(lambda config: config.add_inactive_status(label))

    def remove_status(self, label: str) -> Result[PipelineConfig, str]:
        return self._change(lambda config: config.remove_status(label))


class JobBoardService:
    def __init__(self, repository: JobBoardRepository):
        self.repository = repository

    def list_boards(self) -> Result[list[JobBoard], str]:
        return self.repository.get_all()

    def resolve_for_url(self, url: str) -> Result[JobBoard | None, str]:
        domain = domain_from_url(url)
        if domain is None:
            return Ok(None)
        return self.repository.find_by_domain(domain)

    def register(self, name: str, url_or_domain: str) -> Result[JobBoard, str]:
        """Create a board for the host of ``url_or_domain``, or return the
        board that already covers it."""
        domain = domain_from_url(url_or_domain)
        if domain is None:
            return Err(f"'{url_or_domain}' does not contain a domain")

        existing = self.repository.find_by_domain(domain)
        if existing.is_err():
            return existing
        if existing.unwrap() is not None:
            return Ok(existing.unwrap())

        root_domain = domain.removeprefix("www.")
        created = self.repository.create({"name": name, "root_domain": root_domain, "domains": [root_domain, f"www.{root_domain}"]})
        if created.is_ok():
            logger.info("Registered job board %s (%s)", name, root_domain)
        return created

    def seed(self) -> Result[int, str]:
        return self.repository.seed_common_boards()

    def delete(self, board_id: str) -> Result[None, str]:
        return self.repository.delete(board_id)
