from __future__ import annotations
"""Warranty claims raised against suppliers for sold devices.

Pending -> Submitted -> Approved | Rejected -> Closed. The first move into a
resolved status stamps resolution_date; later moves keep the original stamp.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from phoneshop.errors import InvalidReferenceError, InvalidTransitionError
from phoneshop.models import WarrantyClaim
from phoneshop.services import sales as sale_service
from phoneshop.services import suppliers as supplier_service
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.fsm import TransitionValidator
from phoneshop.utils.validation import coerce_float, validate_status, pick

logger = logging.getLogger(__name__)

WARRANTY_FSM = TransitionValidator({
    WarrantyClaim.STATUS_PENDING: {WarrantyClaim.STATUS_SUBMITTED},
    WarrantyClaim.STATUS_SUBMITTED: {WarrantyClaim.STATUS_APPROVED, WarrantyClaim.STATUS_REJECTED},
    WarrantyClaim.STATUS_APPROVED: {WarrantyClaim.STATUS_CLOSED},
    WarrantyClaim.STATUS_REJECTED: {WarrantyClaim.STATUS_CLOSED},
    WarrantyClaim.STATUS_CLOSED: set(),
})

EDITABLE_FIELDS = ('supplier_id', 'issue_description', 'serial_number', 'claim_amount',
                   'supplier_response', 'resolution_notes')
ALL = 'All'


def repository(session: Session) -> Repository[WarrantyClaim]:
    return Repository(session, WarrantyClaim, label='Warranty claim')


def _claim_amount(value: Any) -> float:
    return coerce_float(value, 'claim_amount', default=0.0)


def _require_supplier(session: Session, supplier_id: Any) -> int:
    supplier = supplier_service.repository(session).get(supplier_id)
    if supplier is None:
        raise InvalidReferenceError("Invalid supplier ID - supplier not found")
    return supplier.id


def list_claims(session: Session) -> List[WarrantyClaim]:
    return sorted(repository(session).get_all(), key=lambda c: c.claim_date, reverse=True)


def get_claim(session: Session, claim_id: Any) -> WarrantyClaim:
    return repository(session).get_by_id(claim_id)


def claims_by_sale(session: Session, sale_id: Any) -> List[WarrantyClaim]:
    return [c for c in list_claims(session) if str(c.sale_id) == str(sale_id)]


def claims_by_status(session: Session, status: Optional[str]) -> List[WarrantyClaim]:
    claims = list_claims(session)
    if not status or status == ALL:
        return claims
    return [c for c in claims if c.status == status]


def create_claim(session: Session, data: Dict[str, Any]) -> WarrantyClaim:
    """Open a Pending claim; the sale and the supplier must both exist."""
    sale = sale_service.repository(session).get(data.get('sale_id'))
    if sale is None:
        raise InvalidReferenceError("Invalid sale ID - sale not found")
    supplier_id = _require_supplier(session, data.get('supplier_id'))
    claim = repository(session).create({
        'sale_id': sale.id,
        'supplier_id': supplier_id,
        'claim_date': utcnow(),
        'issue_description': data.get('issue_description') or '',
        'serial_number': data.get('serial_number') or '',
        'status': WarrantyClaim.STATUS_PENDING,
        'claim_amount': _claim_amount(data.get('claim_amount')),
        'supplier_response': '',
        'resolution_date': None,
        'resolution_notes': '',
    })
    session.commit()
    logger.info("warranty claim %s opened for sale %s", claim.id, sale.id)
    return claim


def _apply_status(claim: WarrantyClaim, status: str, now: Optional[datetime]) -> None:
    validate_status(status, WarrantyClaim.ALL_STATUSES)
    try:
        WARRANTY_FSM.assert_can_transition(claim.status, status)
    except InvalidTransitionError:
        logger.warning("warranty claim %s: rejected %s -> %s", claim.id, claim.status, status)
        raise
    logger.info("warranty claim %s: %s -> %s", claim.id, claim.status, status)
    claim.status = status
    if status in WarrantyClaim.RESOLVED_STATUSES and claim.resolution_date is None:
        claim.resolution_date = now or utcnow()


def update_claim(session: Session, claim_id: Any, data: Dict[str, Any], now: Optional[datetime] = None) -> WarrantyClaim:
    """Apply edits; id, claim_date and sale_id never change."""
    claim = get_claim(session, claim_id)
    changes = pick(data, EDITABLE_FIELDS)
    if 'supplier_id' in changes:
        changes['supplier_id'] = _require_supplier(session, changes['supplier_id'])
    if 'claim_amount' in changes:
        changes['claim_amount'] = _claim_amount(changes['claim_amount'])
    repository(session).update(claim.id, changes, immutable=('claim_date', 'sale_id', 'status', 'resolution_date'))
    if data.get('status') and data['status'] != claim.status:
        _apply_status(claim, data['status'], now)
    session.commit()
    return claim


def _lifecycle(session: Session, claim_id: Any, status: str, now: Optional[datetime] = None, **fields: Any) -> WarrantyClaim:
    claim = get_claim(session, claim_id)
    _apply_status(claim, status, now)
    for key, value in fields.items():
        if value is not None:
            setattr(claim, key, value)
    session.commit()
    return claim


def submit_claim(session: Session, claim_id: Any) -> WarrantyClaim:
    return _lifecycle(session, claim_id, WarrantyClaim.STATUS_SUBMITTED)


def approve_claim(session: Session, claim_id: Any, supplier_response: Optional[str] = None, now: Optional[datetime] = None) -> WarrantyClaim:
    return _lifecycle(session, claim_id, WarrantyClaim.STATUS_APPROVED, now, supplier_response=supplier_response)


def reject_claim(session: Session, claim_id: Any, supplier_response: Optional[str] = None, now: Optional[datetime] = None) -> WarrantyClaim:
    return _lifecycle(session, claim_id, WarrantyClaim.STATUS_REJECTED, now, supplier_response=supplier_response)


def close_claim(session: Session, claim_id: Any, resolution_notes: Optional[str] = None, now: Optional[datetime] = None) -> WarrantyClaim:
    return _lifecycle(session, claim_id, WarrantyClaim.STATUS_CLOSED, now, resolution_notes=resolution_notes)


def delete_claim(session: Session, claim_id: Any) -> None:
    repository(session).delete(claim_id)
    session.commit()
    logger.info("warranty claim %s deleted", claim_id)


def claim_statistics(session: Session) -> Dict[str, Any]:
    claims = repository(session).get_all()
    stats: Dict[str, Any] = {'total': len(claims)}
    for status in WarrantyClaim.ALL_STATUSES:
        stats[status.lower()] = sum(1 for c in claims if c.status == status)
    stats['total_claim_amount'] = sum(float(c.claim_amount or 0) for c in claims)
    stats['approved_amount'] = sum(float(c.claim_amount or 0) for c in claims if c.status == WarrantyClaim.STATUS_APPROVED)
    return stats
