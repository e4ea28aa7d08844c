from __future__ import annotations

import copy

from jobtracker.core.pipeline import PipelineConfig
from jobtracker.core.ports import PipelineConfigRepository
from jobtracker.core.result import Ok, Result
from jobtracker.storage.base import Document, DocumentStore


class MemoryDocumentStore(DocumentStore):
    """Process-local store; hands out copies so callers never alias stored state."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}

    def get(self, key: str) -> Document | None:
        document = self._documents.get(key)
        return copy.deepcopy(document) if document is not None else None

    def all(self) -> list[Document]:
        return [copy.deepcopy(document) for document in self._documents.values()]

    def put(self, document: Document) -> None:
        self._documents[str(document["id"])] = copy.deepcopy(document)

    def delete(self, key: str) -> bool:
        return self._documents.pop(key, None) is not None

    def clear(self) -> None:
        self._documents.clear()


class MemoryPipelineConfigRepository(PipelineConfigRepository):
    def __init__(self) -> None:
        self._data: dict[str, list[str]] | None = None

    def load(self) -> Result[PipelineConfig, str]:
        if self._data is None:
            return Ok(PipelineConfig.default())
        return PipelineConfig.from_data(self._data).map_err(lambda exc: f"Failed to load pipeline configuration: {exc}")

    def save(self, config: PipelineConfig) -> Result[None, str]:
        self._data = config.to_data()
        return Ok(None)
