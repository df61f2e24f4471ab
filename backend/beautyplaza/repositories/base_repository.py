# backend/beautyplaza/repositories/base_repository.py
"""
Shared data access for Beauty Plaza repositories.

Every repository wraps one model and one session. Writes are flushed so
generated ids and constraint errors surface immediately, but nothing here
commits: the owning service holds the transaction boundary.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
import logging
from typing import Any, Generic, Iterator, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from ..core.exceptions import RepositoryException

ModelT = TypeVar("ModelT")


class IRepository(ABC, Generic[ModelT]):
    """Minimal contract the service layer relies on."""

    @abstractmethod
    def get_by_id(self, id: Any) -> Optional[ModelT]:
        ...

    @abstractmethod
    def create(self, **fields: Any) -> ModelT:
        """Insert a row; raises RepositoryException on constraint violations."""

    @abstractmethod
    def delete(self, id: Any) -> bool:
        """Remove a row; False when nothing matched."""

    @abstractmethod
    def exists(self, **criteria: Any) -> bool:
        ...


class BaseRepository(IRepository[ModelT]):
    """SQLAlchemy implementation shared by the concrete repositories."""

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @contextmanager
    def _guard(self, action: str, *, rollback: bool = False) -> Iterator[None]:
        """Translate SQLAlchemy failures into RepositoryException."""
        name = self.model.__name__
        try:
            yield
        except IntegrityError as exc:
            self.logger.warning("Constraint violated while trying to %s %s: %s", action, name, exc)
            if rollback:
                self.db.rollback()
            raise RepositoryException(f"Cannot {action} {name}: constraint violated") from exc
        except SQLAlchemyError as exc:
            self.logger.error("Database error while trying to %s %s: %s", action, name, exc)
            if rollback:
                self.db.rollback()
            raise RepositoryException(f"Failed to {action} {name}: {exc}") from exc

    def _primary_key_column(self) -> Any:
        return self.model.id

    def get_by_id(self, id: Any) -> Optional[ModelT]:
        with self._guard("load"):
            return self._build_query().filter(self._primary_key_column() == id).first()

    def create(self, **fields: Any) -> ModelT:
        with self._guard("create", rollback=True):
            entity = self.model(**fields)
            self.db.add(entity)
            self.db.flush()
        return entity

    def delete(self, id: Any) -> bool:
        """
        Delete by primary key.

        Rows still referenced by foreign keys raise RepositoryException so
        the calling service can report a conflict.
        """
        entity = self.get_by_id(id)
        if entity is None:
            return False
        with self._guard("delete", rollback=True):
            self.db.delete(entity)
            self.db.flush()
        return True

    def exists(self, **criteria: Any) -> bool:
        return self.find_one_by(**criteria) is not None

    def find_one_by(self, **criteria: Any) -> Optional[ModelT]:
        with self._guard("query"):
            return self._build_query().filter_by(**criteria).first()

    def flush(self) -> None:
        self.db.flush()

    def refresh(self, instance: ModelT) -> None:
        self.db.refresh(instance)

    # helpers for subclasses

    def _build_query(self) -> Query:
        return self.db.query(self.model)

    def _execute_query(self, query: Query) -> List[ModelT]:
        with self._guard("query"):
            return query.all()

    def _execute_scalar(self, query: Query) -> Any:
        with self._guard("query"):
            return query.scalar()
