from __future__ import annotations
from flask import Blueprint, request
from phoneshop import get_db
from phoneshop.models import Customer
from phoneshop.services import customers as customer_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort

cust_bp = Blueprint('customers', __name__)

SORTABLE = {'id', 'name', 'email', 'customer_code', 'registration_date', 'loyalty_points', 'store_credit'}


def _list(rows):
    rows_json = apply_multi_sort([_customer_json(c) for c in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@cust_bp.get('')
def list_customers():
    session = get_db()
    filter_specs = {
        'name': {'match': lambda c, v: v.lower() in c.name.lower()},
        'email': {'match': lambda c, v: v.lower() in (c.email or '').lower()},
        'min_points': {'coerce': int, 'match': lambda c, v: c.loyalty_points >= v},
    }
    return _list(apply_filters(customer_service.list_customers(session), filter_specs, request.args))


@cust_bp.post('')
def create_customer():
    c = customer_service.create_customer(get_db(), request.get_json(silent=True) or {})
    return _customer_json(c), 201


@cust_bp.get('/search')
def search_customers():
    return _list(customer_service.search_customers(get_db(), request.args.get('q', '')))


@cust_bp.get('/code/<code>')
def get_customer_by_code(code: str):
    c = customer_service.get_by_code(get_db(), code)
    return item_response(_customer_json(c), c.updated_at)


@cust_bp.get('/<int:customer_id>')
def get_customer(customer_id: int):
    c = customer_service.get_customer(get_db(), customer_id)
    return item_response(_customer_json(c), c.updated_at)


@cust_bp.put('/<int:customer_id>')
def update_customer(customer_id: int):
    c = customer_service.update_customer(get_db(), customer_id, request.get_json(silent=True) or {})
    return _customer_json(c)


@cust_bp.delete('/<int:customer_id>')
def delete_customer(customer_id: int):
    customer_service.delete_customer(get_db(), customer_id)
    return {'success': True}


@cust_bp.post('/<int:customer_id>/store-credit')
def add_store_credit(customer_id: int):
    data = request.get_json(silent=True) or {}
    c = customer_service.add_store_credit(get_db(), customer_id, data.get('amount'))
    return _customer_json(c)


def _customer_json(c: Customer):
    return {
        'id': c.id,
        'customer_code': c.customer_code,
        'name': c.name,
        'email': c.email,
        'phone': c.phone,
        'address': c.address,
        'registration_date': to_utc_z(c.registration_date),
        'purchase_history': list(c.purchase_history or []),
        'repair_history': list(c.repair_history or []),
        'loyalty_points': c.loyalty_points,
        'store_credit': c.store_credit,
        'notes': c.notes or {},
    }
