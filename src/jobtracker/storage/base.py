from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

Document = dict[str, Any]


class DocumentStore(ABC):
    """Keyed collection of JSON-compatible documents for one entity type.

    Implementations raise ``StorageError`` on any I/O or decoding failure.
    """

    @abstractmethod
    def get(self, key: str) -> Document | None: ...

    @abstractmethod
    def all(self) -> list[Document]:
        """Documents in insertion order."""

    @abstractmethod
    def put(self, document: Document) -> None:
        """Insert or replace the document with the same ``id``."""

    @abstractmethod
    def delete(self, key: str) -> bool: ...

    @abstractmethod
    def clear(self) -> None: ...
