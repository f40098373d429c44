from __future__ import annotations
from flask import Blueprint, current_app, request
from phoneshop import get_db
from phoneshop.models import Sale
from phoneshop.services import customers as customer_service
from phoneshop.services import sales as sale_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort
from phoneshop.utils.validation import coerce_datetime, coerce_int, coerce_range_end

sales_bp = Blueprint('sales', __name__)

SORTABLE = {'id', 'timestamp', 'total', 'subtotal', 'customer_id', 'payment_method'}


def _list(rows):
    rows_json = apply_multi_sort([_sale_json(s) for s in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@sales_bp.get('/sales')
def list_sales():
    filter_specs = {
        'customer_id': {'coerce': int, 'match': lambda s, v: s.customer_id == v},
        'payment_method': {'match': lambda s, v: s.payment_method == v, 'validate': lambda v: v in Sale.ALL_PAYMENT_METHODS},
        'from': {'coerce': lambda v: coerce_datetime(v, 'from'), 'match': lambda s, v: v is None or s.timestamp >= v},
        'to': {'coerce': lambda v: coerce_range_end(v, 'to'), 'match': lambda s, v: v is None or s.timestamp <= v},
    }
    return _list(apply_filters(sale_service.list_sales(get_db()), filter_specs, request.args))


@sales_bp.post('/sales')
def complete_sale():
    """Checkout: validates stock, writes the sale and decrements inventory atomically."""
    sale = sale_service.complete_sale(get_db(), request.get_json(silent=True) or {}, current_app.config['TAX_RATE'])
    return _sale_json(sale), 201


@sales_bp.get('/sales/recent')
def recent_sales():
    limit = coerce_int(request.args.get('limit', 10), 'limit', minimum=1)
    return {'data': [_sale_json(s) for s in sale_service.recent_sales(get_db(), limit)]}


@sales_bp.get('/sales/<int:sale_id>')
def get_sale(sale_id: int):
    s = sale_service.get_sale(get_db(), sale_id)
    return item_response(_sale_json(s), s.updated_at)


@sales_bp.get('/customers/<code>/sales')
def customer_sales(code: str):
    session = get_db()
    customer = customer_service.get_by_code(session, code)
    return _list(sale_service.sales_by_customer(session, customer.id))


def _sale_json(s: Sale):
    return {
        'id': s.id,
        'sale_code': s.sale_code,
        'customer_id': s.customer_id,
        'items': [dict(i) for i in (s.items or [])],
        'subtotal': s.subtotal,
        'tax': s.tax,
        'discount': s.discount,
        'total': s.total,
        'payment_method': s.payment_method,
        'timestamp': to_utc_z(s.timestamp),
    }
