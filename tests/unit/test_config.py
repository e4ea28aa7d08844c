from __future__ import annotations

import pytest
from pydantic import ValidationError

from jobtracker.config import Settings


def test_settings_validate_environment_and_backend() -> None:
    settings = Settings(_env_file=None, app_env="test", storage_backend="json")
    assert settings.storage_backend == "json"

    with pytest.raises(ValidationError):
        Settings(_env_file=None, app_env="staging")
    with pytest.raises(ValidationError):
        Settings(_env_file=None, storage_backend="postgres")


def test_cors_origins_split_and_trimmed() -> None:
    settings = Settings(_env_file=None, cors_origins=" http://a.test , ,http://b.test")
    assert settings.cors_origin_list == ["http://a.test", "http://b.test"]
