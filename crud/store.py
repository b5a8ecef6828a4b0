from abc import ABC, abstractmethod
from typing import Any, List, Optional, Type
import logging

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

class RecordStore(ABC):
    """Point lookups and equality queries the webhook processor relies on.

    Implementations only need atomic single-record reads and writes; no
    cross-record transaction is assumed between calls.
    """

    @abstractmethod
    def get_by_id(self, model: Type, record_id: Any) -> Optional[Any]:
        ...

    @abstractmethod
    def query_equals(self, model: Type, limit: int = 1, **filters) -> List[Any]:
        """Records whose fields equal ``filters``, oldest first"""

    @abstractmethod
    def insert(self, model: Type, **values) -> Any:
        ...

    @abstractmethod
    def update_by_id(self, model: Type, record_id: Any, **values) -> Optional[Any]:
        ...

class SQLAlchemyRecordStore(RecordStore):
    """RecordStore backed by a SQLAlchemy session; every write commits"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, model, record_id):
        if record_id is None:
            return None
        return self.db.get(model, record_id)

    def query_equals(self, model, limit=1, **filters):
        query = self.db.query(model)
        for field, value in filters.items():
            query = query.filter(getattr(model, field) == value)
        return query.order_by(model.id).limit(limit).all()

    def insert(self, model, **values):
        try:
            record = model(**values)
            self.db.add(record)
            self.db.commit()
            self.db.refresh(record)
            return record
        except Exception as e:
            logger.error(f"Error inserting {model.__name__}: {e}")
            self.db.rollback()
            raise e

    def update_by_id(self, model, record_id, **values):
        try:
            record = self.get_by_id(model, record_id)
            if not record:
                return None
            for field, value in values.items():
                setattr(record, field, value)
            self.db.commit()
            self.db.refresh(record)
            return record
        except Exception as e:
            logger.error(f"Error updating {model.__name__} {record_id}: {e}")
            self.db.rollback()
            raise e
