from __future__ import annotations
from flask import Blueprint, current_app, request
from phoneshop import get_db
from phoneshop.models import Device
from phoneshop.services import devices as device_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort

inv_bp = Blueprint('inventory', __name__)

SORTABLE = {'id', 'name', 'brand', 'model', 'category', 'quantity', 'sale_price', 'cost', 'date_added'}


def _list(rows):
    rows_json = apply_multi_sort([_device_json(d) for d in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@inv_bp.get('/devices')
def list_devices():
    filter_specs = {
        'brand': {'match': lambda d, v: d.brand.lower() == v.lower()},
        'category': {'match': lambda d, v: d.category.lower() == v.lower()},
        'condition': {'match': lambda d, v: d.condition == v, 'validate': lambda v: v in Device.ALL_CONDITIONS},
        'supplier_id': {'coerce': int, 'match': lambda d, v: d.supplier_id == v},
        'q': {'match': lambda d, v: v.lower() in f"{d.display_name} {d.brand} {d.model}".lower()},
    }
    return _list(apply_filters(device_service.list_devices(get_db()), filter_specs, request.args))


@inv_bp.post('/devices')
def create_device():
    d = device_service.create_device(get_db(), request.get_json(silent=True) or {})
    return _device_json(d), 201


@inv_bp.get('/devices/low-stock')
def low_stock():
    threshold = request.args.get('threshold', current_app.config['LOW_STOCK_THRESHOLD'], type=int)
    return _list(device_service.low_stock(get_db(), threshold))


@inv_bp.get('/devices/out-of-stock')
def out_of_stock():
    return _list(device_service.out_of_stock(get_db()))


@inv_bp.get('/devices/imei/<imei>')
def get_device_by_imei(imei: str):
    d = device_service.get_by_imei(get_db(), imei)
    return item_response(_device_json(d), d.updated_at)


@inv_bp.get('/devices/<int:device_id>')
def get_device(device_id: int):
    d = device_service.get_device(get_db(), device_id)
    return item_response(_device_json(d), d.updated_at)


@inv_bp.put('/devices/<int:device_id>')
def update_device(device_id: int):
    d = device_service.update_device(get_db(), device_id, request.get_json(silent=True) or {})
    return _device_json(d)


@inv_bp.put('/devices/<int:device_id>/stock')
def update_stock(device_id: int):
    data = request.get_json(silent=True) or {}
    d = device_service.update_stock(get_db(), device_id, data.get('quantity'))
    return _device_json(d)


@inv_bp.delete('/devices/<int:device_id>')
def delete_device(device_id: int):
    device_service.delete_device(get_db(), device_id)
    return {'success': True}


def _device_json(d: Device):
    return {
        'id': d.id,
        'name': d.display_name,
        'brand': d.brand,
        'model': d.model,
        'category': d.category,
        'condition': d.condition,
        'quantity': d.quantity,
        'sale_price': d.sale_price,
        'cost': d.cost,
        'low_stock_threshold': d.low_stock_threshold,
        'imei': d.imei,
        'serial_number': d.serial_number,
        'supplier_id': d.supplier_id,
        'date_added': to_utc_z(d.date_added),
    }
