from __future__ import annotations
from flask import Blueprint, current_app, request
from phoneshop import get_db
from phoneshop.models import TradeIn
from phoneshop.services import trade_ins as trade_in_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.serialization import jsonable
from phoneshop.utils.sorting import apply_multi_sort
from phoneshop.utils.validation import coerce_datetime, coerce_int, coerce_range_end, require_fields

ti_bp = Blueprint('trade_ins', __name__)

SORTABLE = {'id', 'timestamp', 'offer_amount', 'brand', 'model', 'condition', 'accepted'}


@ti_bp.get('/trade-ins')
def list_trade_ins():
    filter_specs = {
        'customer_id': {'coerce': int, 'match': lambda t, v: t.customer_id == v},
        'brand': {'match': lambda t, v: t.brand.lower() == v.lower()},
        'accepted': {'coerce': lambda v: v.lower() in ('1', 'true', 'yes'), 'match': lambda t, v: t.accepted == v},
    }
    rows = apply_filters(trade_in_service.list_trade_ins(get_db()), filter_specs, request.args)
    rows_json = apply_multi_sort([_trade_in_json(t) for t in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@ti_bp.post('/trade-ins')
def create_trade_in():
    t = trade_in_service.create_trade_in(get_db(), request.get_json(silent=True) or {})
    return _trade_in_json(t), 201


@ti_bp.post('/trade-ins/evaluate')
def evaluate():
    data = request.get_json(silent=True) or {}
    require_fields(data, 'model', 'condition')
    offer = trade_in_service.evaluate_device(data.get('brand', ''), data['model'], data['condition'])
    return {'brand': data.get('brand'), 'model': data['model'], 'condition': data['condition'], 'offer_amount': offer}


@ti_bp.get('/trade-ins/trends')
def trends():
    buckets = coerce_int(request.args.get('buckets', current_app.config['TRADE_IN_BUCKETS']), 'buckets', minimum=1)
    result = trade_in_service.trends(
        get_db(),
        coerce_datetime(request.args.get('start'), 'start'),
        coerce_range_end(request.args.get('end'), 'end'),
        buckets,
    )
    return jsonable(result)


@ti_bp.get('/trade-ins/<int:trade_in_id>')
def get_trade_in(trade_in_id: int):
    t = trade_in_service.get_trade_in(get_db(), trade_in_id)
    return item_response(_trade_in_json(t), t.updated_at)


@ti_bp.put('/trade-ins/<int:trade_in_id>')
def update_trade_in(trade_in_id: int):
    t = trade_in_service.update_trade_in(get_db(), trade_in_id, request.get_json(silent=True) or {})
    return _trade_in_json(t)


def _trade_in_json(t: TradeIn):
    return {
        'id': t.id,
        'trade_in_code': t.trade_in_code,
        'customer_id': t.customer_id,
        'brand': t.brand,
        'model': t.model,
        'condition': t.condition,
        'offer_amount': t.offer_amount,
        'accepted': t.accepted,
        'timestamp': to_utc_z(t.timestamp),
    }
