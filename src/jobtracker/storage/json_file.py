from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from jobtracker.core.errors import StorageError
from jobtracker.core.pipeline import PipelineConfig
from jobtracker.core.ports import PipelineConfigRepository
from jobtracker.core.result import Err, Ok, Result
from jobtracker.storage.base import Document, DocumentStore

logger = logging.getLogger(__name__)


def read_json(path: Path) -> Any | None:
    """Parsed file contents, or ``None`` when the file is missing or blank."""
    try:
        if not path.exists():
            return None
        content = path.read_text(encoding="utf-8")
        if not content.strip():
            return None
        return json.loads(content)
    except (OSError, json.JSONDecodeError) as exc:
        raise StorageError(f"Failed to read from {path}", exc) from exc


def write_json(path: Path, data: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        raise StorageError(f"Failed to write to {path}", exc) from exc


class JsonFileDocumentStore(DocumentStore):
    """One section of a shared JSON document; every call re-reads the file."""

    def __init__(self, path: Path, section: str):
        self.path = path
        self.section = section

    def _read_all(self) -> dict[str, list[Document]]:
        data = read_json(self.path)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise StorageError(f"Failed to read from {self.path}: top level is not an object")
        return data

    def _read_section(self) -> list[Document]:
        section = self._read_all().get(self.section, [])
        if not isinstance(section, list):
            raise StorageError(f"Failed to read from {self.path}: section {self.section} is not a list")
        return section

    def _write_section(self, documents: list[Document]) -> None:
        data = self._read_all()
        data[self.section] = documents
        write_json(self.path, data)

    def get(self, key: str) -> Document | None:
        return next((doc for doc in self._read_section() if doc.get("id") == key), None)

    def all(self) -> list[Document]:
        return self._read_section()

    def put(self, document: Document) -> None:
        documents = self._read_section()
        for index, existing in enumerate(documents):
            if existing.get("id") == document["id"]:
                documents[index] = document
                break
        else:
            documents.append(document)
        self._write_section(documents)

    def delete(self, key: str) -> bool:
        documents = self._read_section()
        remaining = [doc for doc in documents if doc.get("id") != key]
        if len(remaining) == len(documents):
            return False
        self._write_section(remaining)
        return True

    def clear(self) -> None:
        self._write_section([])


class JsonPipelineConfigRepository(PipelineConfigRepository):
    def __init__(self, path: Path):
        self.path = path

    def load(self) -> Result[PipelineConfig, str]:
        try:
            data = read_json(self.path)
        except StorageError as exc:
            logger.warning("Pipeline config load failed: %s", exc)
            return Err(f"Failed to load pipeline configuration: {exc}")
        if data is None:
            return Ok(PipelineConfig.default())
        if not isinstance(data, dict):
            return Err("Failed to load pipeline configuration: expected an object")
        return PipelineConfig.from_data(data).map_err(lambda exc: f"Failed to load pipeline configuration: {exc}")

    def save(self, config: PipelineConfig) -> Result[None, str]:
        try:
            write_json(self.path, config.to_data())
        except StorageError as exc:
            logger.warning("Pipeline config save failed: %s", exc)
            return Err(f"Failed to save pipeline configuration: {exc}")
        return Ok(None)
