from __future__ import annotations
"""Session-backed repository shared by every domain service.

Each collection gets the same small surface (get_all / get_by_id / create /
update / delete). Ids come from an IdAllocator so they stay unique and are
never handed out twice, even after the highest row is deleted.
"""
import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from phoneshop.errors import NotFoundError
from phoneshop.models.base import IdSequence, entity_code

logger = logging.getLogger(__name__)

T = TypeVar('T')


class IdAllocator:
    """Hands out ``max(existing ids, high-water mark) + 1`` for one table."""

    def __init__(self, session: Session, model: Type[Any]):
        self.session = session
        self.model = model
        self.name = model.__tablename__

    def _sequence(self) -> IdSequence:
        seq = self.session.get(IdSequence, self.name)
        if seq is None:
            seq = IdSequence(name=self.name, last_id=0)
            self.session.add(seq)
            self.session.flush()
        return seq

    def next_id(self) -> int:
        seq = self._sequence()
        current_max = self.session.execute(select(func.max(self.model.id))).scalar() or 0
        new_id = max(seq.last_id or 0, current_max) + 1
        seq.last_id = new_id
        return new_id

    def observe(self, entity_id: int) -> None:
        """Raise the high-water mark for ids assigned outside next_id (fixtures)."""
        seq = self._sequence()
        if entity_id > (seq.last_id or 0):
            seq.last_id = entity_id


class Repository(Generic[T]):
    def __init__(self, session: Session, model: Type[T], label: Optional[str] = None, code_field: Optional[str] = None):
        self.session = session
        self.model = model
        self.label = label or model.__name__
        self.code_field = code_field
        self.ids = IdAllocator(session, model)
        self.columns = set(model.__table__.columns.keys())

    def get_all(self) -> List[T]:
        return list(self.session.execute(select(self.model).order_by(self.model.id)).scalars())

    def find(self, **criteria: Any) -> List[T]:
        stmt = select(self.model).filter_by(**criteria).order_by(self.model.id)
        return list(self.session.execute(stmt).scalars())

    def find_one(self, **criteria: Any) -> Optional[T]:
        rows = self.find(**criteria)
        return rows[0] if rows else None

    def get(self, entity_id: Any) -> Optional[T]:
        try:
            key = int(entity_id)
        except (TypeError, ValueError):
            return None
        return self.session.get(self.model, key)

    def get_by_id(self, entity_id: Any) -> T:
        obj = self.get(entity_id)
        if obj is None:
            raise NotFoundError(f"{self.label} not found")
        return obj

    def exists(self, entity_id: Any) -> bool:
        return self.get(entity_id) is not None

    def create(self, fields: Dict[str, Any], entity_id: Optional[int] = None) -> T:
        if entity_id is None:
            entity_id = self.ids.next_id()
        else:
            self.ids.observe(entity_id)
        data = {k: v for k, v in fields.items() if k in self.columns and k != 'id'}
        if self.code_field and not data.get(self.code_field):
            data[self.code_field] = entity_code(self.model.CODE_PREFIX, entity_id)
        obj = self.model(id=entity_id, **data)
        self.session.add(obj)
        self.session.flush()
        logger.debug("created %s %s", self.label, entity_id)
        return obj

    def update(self, entity_id: Any, changes: Dict[str, Any], immutable: Iterable[str] = ()) -> T:
        obj = self.get_by_id(entity_id)
        frozen = {'id', *immutable}
        if self.code_field:
            frozen.add(self.code_field)
        for key, value in changes.items():
            if key in frozen or key not in self.columns:
                continue
            setattr(obj, key, value)
        self.session.flush()
        return obj

    def delete(self, entity_id: Any) -> None:
        obj = self.get_by_id(entity_id)
        self.session.delete(obj)
        self.session.flush()
        logger.debug("deleted %s %s", self.label, obj.id)


__all__ = ['IdAllocator', 'Repository']
