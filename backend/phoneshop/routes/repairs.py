from __future__ import annotations
from flask import Blueprint, abort, request
from phoneshop import get_db
from phoneshop.models import RepairTicket
from phoneshop.services import repairs as repair_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort

rpr_bp = Blueprint('repairs', __name__)

SORTABLE = {'id', 'status', 'date_received', 'date_completed', 'estimated_cost', 'customer_id'}

# action endpoint -> target status
ACTIONS = {
    'diagnose': RepairTicket.STATUS_DIAGNOSED,
    'start': RepairTicket.STATUS_IN_PROGRESS,
    'complete': RepairTicket.STATUS_COMPLETED,
    'cancel': RepairTicket.STATUS_CANCELLED,
}


def _list(rows):
    rows_json = apply_multi_sort([_ticket_json(t) for t in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@rpr_bp.get('/tickets')
def list_tickets():
    filter_specs = {
        'status': {'match': lambda t, v: t.status == v, 'validate': lambda v: v in RepairTicket.ALL_STATUSES},
        'customer_id': {'coerce': int, 'match': lambda t, v: t.customer_id == v},
    }
    return _list(apply_filters(repair_service.list_tickets(get_db()), filter_specs, request.args))


@rpr_bp.post('/tickets')
def create_ticket():
    t = repair_service.create_ticket(get_db(), request.get_json(silent=True) or {})
    return _ticket_json(t), 201


@rpr_bp.get('/tickets/active')
def active_tickets():
    return _list(repair_service.active_tickets(get_db()))


@rpr_bp.get('/tickets/<int:ticket_id>')
def get_ticket(ticket_id: int):
    t = repair_service.get_ticket(get_db(), ticket_id)
    return item_response(_ticket_json(t), t.updated_at)


@rpr_bp.put('/tickets/<int:ticket_id>')
def update_ticket(ticket_id: int):
    t = repair_service.update_ticket(get_db(), ticket_id, request.get_json(silent=True) or {})
    return _ticket_json(t)


@rpr_bp.delete('/tickets/<int:ticket_id>')
def delete_ticket(ticket_id: int):
    repair_service.delete_ticket(get_db(), ticket_id)
    return {'success': True}


@rpr_bp.post('/tickets/<int:ticket_id>/<action>')
def ticket_action(ticket_id: int, action: str):
    if action not in ACTIONS:
        abort(404)
    data = request.get_json(silent=True) or {}
    extra = {k: data[k] for k in ('diagnosis', 'actual_cost') if k in data}
    t = repair_service.update_status(get_db(), ticket_id, ACTIONS[action], **extra)
    return _ticket_json(t)


def _ticket_json(t: RepairTicket):
    return {
        'id': t.id,
        'ticket_code': t.ticket_code,
        'customer_id': t.customer_id,
        'device_imei': t.device_imei,
        'device_model': t.device_model,
        'issue_description': t.issue_description,
        'diagnosis': t.diagnosis,
        'status': t.status,
        'estimated_cost': t.estimated_cost,
        'actual_cost': t.actual_cost,
        'date_received': to_utc_z(t.date_received),
        'date_completed': to_utc_z(t.date_completed),
    }
