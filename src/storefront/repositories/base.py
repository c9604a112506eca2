from contextlib import contextmanager
from typing import Any, Generic, Optional, Type, TypeVar
import logging

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.core.exceptions import DatabaseError

T = TypeVar('T')

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T]):
    """
    Base repository providing common database operations.

    Every repository works on the Session it is given; nothing here commits.
    Callers (services) own the transaction boundary, which is what lets the
    checkout run several repositories inside one atomic unit.
    """

    model: Type[T]

    def __init__(self, session: Session):
        self.session = session

    @contextmanager
    def translate_errors(self, operation: str):
        """Re-raise SQLAlchemy failures as DatabaseError, keeping the cause chained."""
        try:
            yield
        except IntegrityError as e:
            logger.error(f"Integrity constraint violation during {operation}: {e.orig}")
            raise DatabaseError(f"Data integrity violation: {e.orig}", operation) from e
        except SQLAlchemyError as e:
            logger.error(f"{operation} failed: {e}")
            raise DatabaseError(f"{operation} failed: {e}", operation) from e

    def get_by_id(self, entity_id: int) -> Optional[T]:
        """Get entity by primary key"""
        with self.translate_errors("SELECT"):
            return self.session.get(self.model, entity_id)

    def count(self, *criteria: Any) -> int:
        with self.translate_errors("COUNT"):
            stmt = select(func.count()).select_from(self.model)
            if criteria:
                stmt = stmt.where(*criteria)
            return int(self.session.execute(stmt).scalar_one())

    def add(self, entity: T) -> T:
        """Stage a new entity and flush so generated ids are available"""
        with self.translate_errors("INSERT"):
            self.session.add(entity)
            self.session.flush()
            return entity

    def delete(self, entity: T) -> None:
        with self.translate_errors("DELETE"):
            self.session.delete(entity)
            self.session.flush()
