from __future__ import annotations

from typing import Any

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class DocumentMixin:
    """Maps a row to and from the entity's JSON document.

    Column keys equal document keys; NULL columns are left out of the
    document so absent optional fields stay absent. A record built from a
    document sets every column, so a merge writes NULL over a cleared field.
    """

    def to_document(self) -> dict[str, Any]:
        document: dict[str, Any] = {}
        for column in self.__table__.columns:
            value = getattr(self, column.key)
            if value is not None:
                document[column.key] = value
        return document

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> Any:
        keys = {column.key for column in cls.__table__.columns}
        return cls(**{key: document.get(key) for key in keys})
