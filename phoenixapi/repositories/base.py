import logging
from abc import ABC
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

T = TypeVar("T")
SchemaType = TypeVar("SchemaType", bound=BaseModel)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[T, SchemaType], ABC):
    """Base class for every repository; reads always come back as Pydantic schemas."""

    def __init__(
        self, model_class: Type[T], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, model_instance: Any) -> Optional[SchemaType]:
        if model_instance is None:
            return None
        try:
            return self.schema_class.model_validate(model_instance)
        except PydanticValidationError as e:
            raise ValueError(
                f"{type(model_instance).__name__} does not fit "
                f"{self.schema_class.__name__}: {e}"
            ) from e

    def _to_schemas(self, instances: List[Any]) -> List[SchemaType]:
        return [self._to_schema(instance) for instance in instances if instance is not None]

    def _ensure_clean_session(self) -> None:
        """Roll back a session left in a failed state by an earlier error"""
        if not getattr(self.db, "is_active", True):
            logger.warning("Rolling back inactive session before repository call")
            self.db.rollback()

    def _query_filtered(self, filters: Optional[Dict[str, Any]] = None):
        query = self.db.query(self.model_class)
        if filters:
            for key, value in filters.items():
                if hasattr(self.model_class, key):
                    query = query.filter(getattr(self.model_class, key) == value)
        return query

    def _get_instance(self, instance_id: Any) -> Optional[T]:
        return self.db.get(self.model_class, instance_id)

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        self._ensure_clean_session()
        return self._to_schema(self._get_instance(id))

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        self._ensure_clean_session()
        column = getattr(self.model_class, field_name)
        return self._to_schema(self.db.query(self.model_class).filter(column == value).first())

    def find_all(
        self,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[SchemaType]:
        self._ensure_clean_session()
        query = self._query_filtered(filters)
        if order_by and hasattr(self.model_class, order_by):
            query = query.order_by(getattr(self.model_class, order_by))
        query = query.offset(offset or None).limit(limit or None)
        return self._to_schemas(query.all())

    def _write(self, instance: Any, commit: bool, refresh: bool = True) -> None:
        """Flush pending changes to ``instance``; roll back and re-raise on failure"""
        try:
            self.db.flush()
            if refresh:
                self.db.refresh(instance)
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def create(self, commit: bool = True, **kwargs) -> Optional[SchemaType]:
        """Insert a row; with ``commit=False`` the caller owns the transaction"""
        self._ensure_clean_session()
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self._write(instance, commit)
        return self._to_schema(instance)

    def update(
        self, instance_id: Any, commit: bool = True, **kwargs
    ) -> Optional[SchemaType]:
        self._ensure_clean_session()
        instance = self._get_instance(instance_id)
        if instance is None:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        self._write(instance, commit)
        return self._to_schema(instance)

    def delete(self, instance_id: Any, commit: bool = True) -> bool:
        self._ensure_clean_session()
        instance = self._get_instance(instance_id)
        if instance is None:
            return False

        self.db.delete(instance)
        self._write(instance, commit, refresh=False)
        return True

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        self._ensure_clean_session()
        return self._query_filtered(filters).count()

    def exists(self, filters: Dict[str, Any]) -> bool:
        self._ensure_clean_session()
        return self._query_filtered(filters).first() is not None
