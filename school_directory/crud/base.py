import functools
import logging
from typing import Any, Generic, List, Optional, Type, TypeVar, Union, Dict
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from school_directory.core.database import Base
from school_directory.core.exceptions import ConstraintViolationError, StoreUnavailableError

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)

def store_call(method):
    """Translate SQLAlchemy failures into store errors and roll the session back."""
    @functools.wraps(method)
    def wrapper(self, db: Session, *args, **kwargs):
        try:
            return method(self, db, *args, **kwargs)
        except IntegrityError as e:
            db.rollback()
            logger.error(f"Constraint violation in {self.model.__tablename__}.{method.__name__}: {e}")
            raise ConstraintViolationError("Record violates a store constraint") from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Store call {self.model.__tablename__}.{method.__name__} failed: {e}")
            raise StoreUnavailableError("Record store is unavailable") from e
    return wrapper

class CRUDBase(Generic[ModelType, CreateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    @store_call
    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    @store_call
    def count(self, db: Session) -> int:
        return db.query(func.count(self.model.id)).scalar() or 0

    @store_call
    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100, order_by: Any = None
    ) -> List[ModelType]:
        query = db.query(self.model)
        if order_by is not None:
            query = query.order_by(order_by)
        return query.offset(skip).limit(limit).all()

    @store_call
    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]]) -> ModelType:
        obj_in_data = jsonable_encoder(obj_in)
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj
