from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from jobtracker.core.errors import StorageError
from jobtracker.db.base import Base
from jobtracker.storage.base import Document, DocumentStore


class SqlAlchemyDocumentStore(DocumentStore):
    """Stores entity documents as rows of ``model``; one session per call."""

    def __init__(self, session_factory: sessionmaker[Session], model: type[Base]):
        self.session_factory = session_factory
        self.model = model

    def _fail(self, action: str, exc: SQLAlchemyError) -> StorageError:
        return StorageError(f"{action} on {self.model.__tablename__} failed", exc)

    def get(self, key: str) -> Document | None:
        try:
            with self.session_factory() as session:
                row = session.get(self.model, key)
                return row.to_document() if row is not None else None
        except SQLAlchemyError as exc:
            raise self._fail("select", exc) from exc

    def all(self) -> list[Document]:
        statement = select(self.model).order_by(self.model.created_at, self.model.id)
        try:
            with self.session_factory() as session:
                return [row.to_document() for row in session.scalars(statement).all()]
        except SQLAlchemyError as exc:
            raise self._fail("select", exc) from exc

    def put(self, document: Document) -> None:
        try:
            with self.session_factory() as session:
                session.merge(self.model.from_document(document))
                session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("upsert", exc) from exc

    def delete(self, key: str) -> bool:
        try:
            with self.session_factory() as session:
                result = session.execute(delete(self.model).where(self.model.id == key))
                session.commit()
                return result.rowcount > 0
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc

    def clear(self) -> None:
        try:
            with self.session_factory() as session:
                session.execute(delete(self.model))
                session.commit()
        except SQLAlchemyError as exc:
            raise self._fail("delete", exc) from exc
