from __future__ import annotations
from flask import Blueprint, request
from phoneshop import get_db
from phoneshop.models import WarrantyClaim
from phoneshop.services import warranty_claims as claim_service
from phoneshop.time_utils import to_utc_z
from phoneshop.utils.filters import apply_filters
from phoneshop.utils.listing import apply_pagination, latest_timestamp, list_response, item_response
from phoneshop.utils.sorting import apply_multi_sort

wty_bp = Blueprint('warranty', __name__)

SORTABLE = {'id', 'claim_date', 'status', 'claim_amount', 'sale_id', 'supplier_id'}


def _body():
    return request.get_json(silent=True) or {}


@wty_bp.get('/claims')
def list_claims():
    session = get_db()
    filter_specs = {
        'sale_id': {'coerce': int, 'match': lambda c, v: c.sale_id == v},
        'supplier_id': {'coerce': int, 'match': lambda c, v: c.supplier_id == v},
    }
    rows = apply_filters(claim_service.claims_by_status(session, request.args.get('status')), filter_specs, request.args)
    rows_json = apply_multi_sort([_claim_json(c) for c in rows], request.args.get('sort'), SORTABLE)
    page, total, limit, offset = apply_pagination(rows_json)
    return list_response(page, total, limit, offset, latest_timestamp(rows))


@wty_bp.post('/claims')
def create_claim():
    c = claim_service.create_claim(get_db(), _body())
    return _claim_json(c), 201


@wty_bp.get('/claims/statistics')
def statistics():
    return claim_service.claim_statistics(get_db())


@wty_bp.get('/claims/<int:claim_id>')
def get_claim(claim_id: int):
    c = claim_service.get_claim(get_db(), claim_id)
    return item_response(_claim_json(c), c.updated_at)


@wty_bp.put('/claims/<int:claim_id>')
def update_claim(claim_id: int):
    return _claim_json(claim_service.update_claim(get_db(), claim_id, _body()))


@wty_bp.delete('/claims/<int:claim_id>')
def delete_claim(claim_id: int):
    claim_service.delete_claim(get_db(), claim_id)
    return {'success': True}


@wty_bp.post('/claims/<int:claim_id>/submit')
def submit_claim(claim_id: int):
    return _claim_json(claim_service.submit_claim(get_db(), claim_id))


@wty_bp.post('/claims/<int:claim_id>/approve')
def approve_claim(claim_id: int):
    return _claim_json(claim_service.approve_claim(get_db(), claim_id, _body().get('supplier_response')))


@wty_bp.post('/claims/<int:claim_id>/reject')
def reject_claim(claim_id: int):
    return _claim_json(claim_service.reject_claim(get_db(), claim_id, _body().get('supplier_response')))


@wty_bp.post('/claims/<int:claim_id>/close')
def close_claim(claim_id: int):
    return _claim_json(claim_service.close_claim(get_db(), claim_id, _body().get('resolution_notes')))


def _claim_json(c: WarrantyClaim):
    return {
        'id': c.id,
        'sale_id': c.sale_id,
        'supplier_id': c.supplier_id,
        'claim_date': to_utc_z(c.claim_date),
        'issue_description': c.issue_description,
        'serial_number': c.serial_number,
        'claim_amount': c.claim_amount,
        'status': c.status,
        'supplier_response': c.supplier_response,
        'resolution_date': to_utc_z(c.resolution_date),
        'resolution_notes': c.resolution_notes,
    }
