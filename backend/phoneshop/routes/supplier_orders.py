from __future__ import annotations
from flask import Blueprint, current_app, request
from phoneshop import get_db
from phoneshop.models import SupplierOrder
from phoneshop.services import supplier_orders as order_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.serialization import jsonable
from phoneshop.utils.sorting import apply_multi_sort

so_bp = Blueprint('supplier_orders', __name__)

SORTABLE = {'id', 'supplier_id', 'status', 'order_date', 'expected_delivery', 'total_cost'}


def _window_days() -> int:
    return current_app.config['REORDER_WINDOW_DAYS']


@so_bp.get('/orders')
def list_orders():
    filter_specs = {
        'status': {'match': lambda o, v: o.status == v, 'validate': lambda v: v in SupplierOrder.ALL_STATUSES},
        'supplier_id': {'coerce': int, 'match': lambda o, v: o.supplier_id == v},
    }
    rows = apply_filters(order_service.list_orders(get_db()), filter_specs, request.args)
    rows_json = apply_multi_sort([_order_json(o) for o in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@so_bp.post('/orders')
def create_order():
    o = order_service.create_order(get_db(), request.get_json(silent=True) or {})
    return _order_json(o), 201


@so_bp.get('/orders/suggestions')
def suggestions():
    return {'data': order_service.suggested_items(get_db(), window_days=_window_days())}


@so_bp.get('/orders/auto-suggestions')
def auto_suggestions():
    return {'data': order_service.auto_suggestions(get_db(), window_days=_window_days())}


@so_bp.post('/orders/suggestions/<int:device_id>/approve')
def approve_suggestion(device_id: int):
    o = order_service.approve_suggestion(get_db(), device_id, request.get_json(silent=True) or {}, window_days=_window_days())
    return _order_json(o), 201


@so_bp.post('/orders/suggestions/<int:device_id>/dismiss')
def dismiss_suggestion(device_id: int):
    order_service.dismiss_suggestion(get_db(), device_id)
    return {'success': True}


@so_bp.get('/orders/performance')
def performance():
    return {'data': jsonable(order_service.supplier_performance(get_db()))}


@so_bp.get('/orders/<int:order_id>')
def get_order(order_id: int):
    o = order_service.get_order(get_db(), order_id)
    return item_response(_order_json(o), o.updated_at)


@so_bp.put('/orders/<int:order_id>')
def update_order(order_id: int):
    o = order_service.update_order(get_db(), order_id, request.get_json(silent=True) or {})
    return _order_json(o)


@so_bp.delete('/orders/<int:order_id>')
def delete_order(order_id: int):
    order_service.delete_order(get_db(), order_id)
    return {'success': True}


@so_bp.post('/orders/<int:order_id>/place')
def place_order(order_id: int):
    return _order_json(order_service.place_order(get_db(), order_id))


@so_bp.post('/orders/<int:order_id>/receive')
def receive_order(order_id: int):
    return _order_json(order_service.receive_order(get_db(), order_id))


@so_bp.post('/orders/<int:order_id>/cancel')
def cancel_order(order_id: int):
    return _order_json(order_service.cancel_order(get_db(), order_id))


def _order_json(o: SupplierOrder):
    return {
        'id': o.id,
        'supplier_id': o.supplier_id,
        'order_date': to_utc_z(o.order_date),
        'expected_delivery': to_utc_z(o.expected_delivery),
        'received_date': to_utc_z(o.received_date),
        'status': o.status,
        'items': [dict(i) for i in (o.items or [])],
        'total_cost': o.total_cost,
        'notes': o.notes,
    }
