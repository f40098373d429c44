from __future__ import annotations
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from phoneshop.errors import NotFoundError
from phoneshop.models import Supplier
from phoneshop.services.repository import Repository
from phoneshop.utils.validation import require_fields, validate_status, pick

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'contact_name', 'email', 'phone', 'status')


def repository(session: Session) -> Repository[Supplier]:
    return Repository(session, Supplier, label='Supplier', code_field='supplier_code')


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    fields = pick(data, EDITABLE_FIELDS)
    if 'status' in fields:
        validate_status(fields['status'], Supplier.ALL_STATUSES)
    return fields


def list_suppliers(session: Session) -> List[Supplier]:
    return sorted(repository(session).get_all(), key=lambda s: s.name.casefold())


def get_supplier(session: Session, supplier_id: Any) -> Supplier:
    return repository(session).get_by_id(supplier_id)


def get_by_code(session: Session, supplier_code: str) -> Supplier:
    supplier = repository(session).find_one(supplier_code=supplier_code)
    if supplier is None:
        raise NotFoundError("Supplier not found")
    return supplier


def create_supplier(session: Session, data: Dict[str, Any]) -> Supplier:
    require_fields(data, 'name')
    fields = _clean(data)
    fields.setdefault('status', Supplier.STATUS_ACTIVE)
    supplier = repository(session).create(fields)
    session.commit()
    logger.info("supplier %s created (%s)", supplier.id, supplier.supplier_code)
    return supplier


def update_supplier(session: Session, supplier_id: Any, data: Dict[str, Any]) -> Supplier:
    changes = _clean(data)
    if 'name' in changes:
        require_fields(changes, 'name')
    supplier = repository(session).update(supplier_id, changes)
    session.commit()
    return supplier


def active_suppliers(session: Session) -> List[Supplier]:
    return [s for s in list_suppliers(session) if s.status == Supplier.STATUS_ACTIVE]
