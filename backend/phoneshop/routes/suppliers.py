from __future__ import annotations
from flask import Blueprint, request
from phoneshop import get_db
from phoneshop.models import Supplier
from phoneshop.services import suppliers as supplier_service
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort

sup_bp = Blueprint('suppliers', __name__)

SORTABLE = {'id', 'name', 'status', 'supplier_code'}


def _list(rows):
    rows_json = apply_multi_sort([_supplier_json(s) for s in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@sup_bp.get('/suppliers')
def list_suppliers():
    filter_specs = {
        'name': {'match': lambda s, v: v.lower() in s.name.lower()},
        'status': {'match': lambda s, v: s.status == v, 'validate': lambda v: v in Supplier.ALL_STATUSES},
    }
    return _list(apply_filters(supplier_service.list_suppliers(get_db()), filter_specs, request.args))


@sup_bp.post('/suppliers')
def create_supplier():
    s = supplier_service.create_supplier(get_db(), request.get_json(silent=True) or {})
    return _supplier_json(s), 201


@sup_bp.get('/suppliers/active')
def active_suppliers():
    return _list(supplier_service.active_suppliers(get_db()))


@sup_bp.get('/suppliers/<int:supplier_id>')
def get_supplier(supplier_id: int):
    s = supplier_service.get_supplier(get_db(), supplier_id)
    return item_response(_supplier_json(s), s.updated_at)


@sup_bp.put('/suppliers/<int:supplier_id>')
def update_supplier(supplier_id: int):
    s = supplier_service.update_supplier(get_db(), supplier_id, request.get_json(silent=True) or {})
    return _supplier_json(s)


def _supplier_json(s: Supplier):
    return {
        'id': s.id,
        'supplier_code': s.supplier_code,
        'name': s.name,
        'contact_name': s.contact_name,
        'email': s.email,
        'phone': s.phone,
        'status': s.status,
    }
