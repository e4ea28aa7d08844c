from __future__ import annotations

import itertools
from collections.abc import Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from jobtracker.api.app import create_app
from jobtracker.config import Settings
from jobtracker.container import Container, build_container

START = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class FakeClock:
    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta: float) -> datetime:
        self.now += timedelta(**delta)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def ids():
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


def make_settings(tmp_path: Path, backend: str = "sqlite", **overrides) -> Settings:
    values = {
        "app_env": "test",
        "storage_backend": backend,
        "database_url": f"sqlite:///{tmp_path / 'jobtracker.db'}",
        "data_dir": tmp_path,
        "json_store_path": tmp_path / "jobtracker.json",
        "pipeline_config_path": tmp_path / "pipeline.json",
        "seed_job_boards": True,
        **overrides,
    }
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def container(settings: Settings, clock: FakeClock, ids) -> Iterator[Container]:
    built = build_container(settings, clock=clock, id_factory=ids)
    built.bootstrap()
    yield built
    built.close()


@pytest.fixture(params=["memory", "json", "sqlite"])
def any_container(request, tmp_path: Path, clock: FakeClock, ids) -> Iterator[Container]:
    built = build_container(make_settings(tmp_path, request.param), clock=clock, id_factory=ids)
    built.bootstrap()
    yield built
    built.close()


@pytest.fixture
def memory_container(tmp_path: Path, clock: FakeClock, ids) -> Container:
    built = build_container(make_settings(tmp_path, "memory", seed_job_boards=False), clock=clock, id_factory=ids)
    built.bootstrap()
    return built


@pytest.fixture
def client(container: Container) -> Iterator[TestClient]:
    with TestClient(create_app(container=container)) as test_client:
        yield test_client
