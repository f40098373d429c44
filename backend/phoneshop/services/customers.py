from __future__ import annotations
"""Customer records: CRUD, search and store credit."""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from phoneshop.errors import NotFoundError
from phoneshop.models import Customer
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.validation import require_fields, coerce_float, coerce_int, pick

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'email', 'phone', 'address', 'loyalty_points', 'store_credit', 'notes')


def repository(session: Session) -> Repository[Customer]:
    return Repository(session, Customer, label='Customer', code_field='customer_code')


def list_customers(session: Session) -> List[Customer]:
    return sorted(repository(session).get_all(), key=lambda c: c.name.casefold())


def get_customer(session: Session, customer_id: Any) -> Customer:
    return repository(session).get_by_id(customer_id)


def get_by_code(session: Session, customer_code: str) -> Customer:
    customer = repository(session).find_one(customer_code=customer_code)
    if customer is None:
        raise NotFoundError("Customer not found")
    return customer


def create_customer(session: Session, data: Dict[str, Any]) -> Customer:
    require_fields(data, 'name')
    fields = pick(data, EDITABLE_FIELDS)
    fields.update(
        purchase_history=[],
        repair_history=[],
        store_credit=0.0,
        loyalty_points=coerce_int(data.get('loyalty_points', 0), 'loyalty_points', minimum=0),
        registration_date=utcnow(),
    )
    customer = repository(session).create(fields)
    session.commit()
    logger.info("customer %s created (%s)", customer.id, customer.customer_code)
    return customer


def update_customer(session: Session, customer_id: Any, data: Dict[str, Any]) -> Customer:
    changes = pick(data, EDITABLE_FIELDS)
    if 'name' in changes:
        require_fields(changes, 'name')
    if 'store_credit' in changes:
        changes['store_credit'] = coerce_float(changes['store_credit'], 'store_credit')
    if 'loyalty_points' in changes:
        changes['loyalty_points'] = coerce_int(changes['loyalty_points'], 'loyalty_points', minimum=0)
    customer = repository(session).update(customer_id, changes)
    session.commit()
    return customer


def delete_customer(session: Session, customer_id: Any) -> None:
    repository(session).delete(customer_id)
    session.commit()
    logger.info("customer %s deleted", customer_id)


def search_customers(session: Session, query: str) -> List[Customer]:
    """Case-insensitive name/email match, raw substring match on phone."""
    needle = (query or '').lower()
    return [
        c for c in repository(session).get_all()
        if needle in c.name.lower() or needle in (c.email or '').lower() or (query or '') in (c.phone or '')
    ]


def add_store_credit(session: Session, customer_id: Any, amount: Any) -> Customer:
    customer = get_customer(session, customer_id)
    customer.store_credit = float(customer.store_credit or 0) + coerce_float(amount, 'amount')
    session.commit()
    logger.info("customer %s store credit now %.2f", customer.id, customer.store_credit)
    return customer


def append_history(customer: Customer, field: str, entity_id: int) -> None:
    """Append an id to purchase_history / repair_history (no commit)."""
    setattr(customer, field, [*(getattr(customer, field) or []), entity_id])
