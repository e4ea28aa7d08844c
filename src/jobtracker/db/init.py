from __future__ import annotations

import logging
from pathlib import Path

from sqlalchemy import Engine

from jobtracker.config import Settings
from jobtracker.db import models  # noqa: F401
from jobtracker.db.base import Base

logger = logging.getLogger(__name__)


def ensure_data_directories(settings: Settings) -> None:
    paths: list[Path] = [
        settings.data_dir,
        settings.json_store_path.parent,
        settings.pipeline_config_path.parent,
    ]
    if settings.database_url.startswith("sqlite:///"):
        database_path = settings.database_url.removeprefix("sqlite:///")
        if database_path and database_path != ":memory:":
            paths.append(Path(database_path).parent)
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)


def init_database(engine: Engine) -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready at %s", engine.url.render_as_string(hide_password=True))
