from __future__ import annotations
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from phoneshop.errors import InvalidTransitionError
from phoneshop.models import RepairTicket
from phoneshop.services import customers as customer_service
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.fsm import TransitionValidator
from phoneshop.utils.validation import require_fields, coerce_float, validate_status, pick

logger = logging.getLogger(__name__)

REPAIRS_FSM = TransitionValidator({
    RepairTicket.STATUS_RECEIVED: {RepairTicket.STATUS_DIAGNOSED, RepairTicket.STATUS_CANCELLED},
    RepairTicket.STATUS_DIAGNOSED: {RepairTicket.STATUS_IN_PROGRESS, RepairTicket.STATUS_CANCELLED},
    RepairTicket.STATUS_IN_PROGRESS: {RepairTicket.STATUS_COMPLETED, RepairTicket.STATUS_CANCELLED},
    RepairTicket.STATUS_COMPLETED: set(),
    RepairTicket.STATUS_CANCELLED: set(),
})

EDITABLE_FIELDS = ('device_imei', 'device_model', 'issue_description', 'diagnosis', 'estimated_cost', 'actual_cost')


def repository(session: Session) -> Repository[RepairTicket]:
    return Repository(session, RepairTicket, label='Repair ticket', code_field='ticket_code')


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    fields = pick(data, EDITABLE_FIELDS)
    if 'estimated_cost' in fields:
        fields['estimated_cost'] = coerce_float(fields['estimated_cost'], 'estimated_cost')
    if fields.get('actual_cost') is not None:
        fields['actual_cost'] = coerce_float(fields['actual_cost'], 'actual_cost')
    return fields


def list_tickets(session: Session) -> List[RepairTicket]:
    return sorted(repository(session).get_all(), key=lambda t: t.date_received, reverse=True)


def get_ticket(session: Session, ticket_id: Any) -> RepairTicket:
    return repository(session).get_by_id(ticket_id)


def create_ticket(session: Session, data: Dict[str, Any]) -> RepairTicket:
    require_fields(data, 'issue_description')
    customer = None
    if data.get('customer_id') not in (None, ''):
        customer = customer_service.get_customer(session, data['customer_id'])
    fields = _clean(data)
    fields.update(
        customer_id=customer.id if customer else None,
        status=RepairTicket.STATUS_RECEIVED,
        date_received=utcnow(),
        date_completed=None,
    )
    ticket = repository(session).create(fields)
    if customer is not None:
        customer_service.append_history(customer, 'repair_history', ticket.id)
    session.commit()
    logger.info("repair ticket %s received", ticket.ticket_code)
    return ticket


def update_ticket(session: Session, ticket_id: Any, data: Dict[str, Any]) -> RepairTicket:
    """Edit descriptive fields; a 'status' key is routed through the state machine."""
    ticket = repository(session).update(ticket_id, _clean(data))
    if data.get('status') and data['status'] != ticket.status:
        return update_status(session, ticket.id, data['status'])
    session.commit()
    return ticket


def update_status(session: Session, ticket_id: Any, status: str, now: Optional[datetime] = None, **extra: Any) -> RepairTicket:
    """Move a ticket along Received -> Diagnosed -> In Progress -> Completed.

    Cancelled is reachable from every non-terminal state. Only Completed stamps
    date_completed. ``extra`` may carry diagnosis / actual_cost recorded with
    the transition.
    """
    ticket = get_ticket(session, ticket_id)
    validate_status(status, RepairTicket.ALL_STATUSES)
    try:
        REPAIRS_FSM.assert_can_transition(ticket.status, status)
    except InvalidTransitionError:
        logger.warning("repair ticket %s: rejected %s -> %s", ticket.id, ticket.status, status)
        raise
    for key, value in _clean(extra).items():
        setattr(ticket, key, value)
    previous = ticket.status
    ticket.status = status
    if status == RepairTicket.STATUS_COMPLETED:
        ticket.date_completed = now or utcnow()
    session.commit()
    logger.info("repair ticket %s: %s -> %s", ticket.id, previous, status)
    return ticket


def delete_ticket(session: Session, ticket_id: Any) -> None:
    repository(session).delete(ticket_id)
    session.commit()


def tickets_by_status(session: Session, status: str) -> List[RepairTicket]:
    return [t for t in list_tickets(session) if t.status == status]


def tickets_by_customer(session: Session, customer_id: Any) -> List[RepairTicket]:
    return [t for t in list_tickets(session) if str(t.customer_id) == str(customer_id)]


def active_tickets(session: Session) -> List[RepairTicket]:
    return [t for t in list_tickets(session) if t.status not in RepairTicket.TERMINAL_STATUSES]
