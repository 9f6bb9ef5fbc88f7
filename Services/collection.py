# Services/collection.py
"""
Document-style access to a SQLAlchemy table.

Documents are plain dicts keyed by column name and filters are equality
maps, e.g. ``{"id": car_id, "status": "available"}``. ``update_one`` and
``delete_one`` run as a single UPDATE/DELETE statement, so the filter is
checked and the change applied atomically by the database.
"""
import logging
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from sqlalchemy import exc
from sqlalchemy.orm import Session, sessionmaker

from Models.schemas import DeleteResult, InsertResult, UpdateResult
from Services.exceptions import StorageError

logger = logging.getLogger(__name__)

Document = Dict[str, Any]


class DocumentCollection:
    def __init__(self, session_factory: sessionmaker, model):
        self._session_factory = session_factory
        self._model = model
        self._columns = [column.key for column in model.__table__.columns]

    @property
    def name(self) -> str:
        return self._model.__tablename__

    @contextmanager
    def _session(self, action: str) -> Iterator[Session]:
        db = self._session_factory()
        try:
            yield db
            db.commit()
        except exc.SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Error during {action} on '{self.name}': {e}")
            raise StorageError(f"{action} on '{self.name}' failed: {e}") from e
        finally:
            db.close()

    def _to_document(self, row) -> Document:
        return {key: getattr(row, key) for key in self._columns}

    def find(self, filter: Document) -> List[Document]:
        with self._session(f"find {filter}") as db:
            rows = db.query(self._model).filter_by(**filter).all()
            return [self._to_document(row) for row in rows]

    def find_one(self, filter: Document) -> Optional[Document]:
        with self._session(f"find_one {filter}") as db:
            row = db.query(self._model).filter_by(**filter).first()
            return self._to_document(row) if row is not None else None

    def insert_one(self, document: Document) -> InsertResult:
        document = dict(document)
        document.setdefault("id", str(uuid.uuid4()))
        with self._session("insert_one") as db:
            db.add(self._model(**document))
        return InsertResult(id=document["id"])

    def update_one(self, filter: Document, values: Document) -> UpdateResult:
        """Apply ``values`` to the document matching ``filter``, if any.

        The filter must include the primary key; the row count of the
        single UPDATE is reported as both matched and modified.
        """
        with self._session(f"update_one {filter}") as db:
            count = (
                db.query(self._model)
                .filter_by(**filter)
                .update(values, synchronize_session=False)
            )
        return UpdateResult(matched_count=count, modified_count=count)

    def delete_one(self, filter: Document) -> DeleteResult:
        with self._session(f"delete_one {filter}") as db:
            count = (
                db.query(self._model)
                .filter_by(**filter)
                .delete(synchronize_session=False)
            )
        return DeleteResult(deleted_count=count)
