from __future__ import annotations
"""List envelopes and cache validators for in-memory collections.

Every list endpoint answers with ``{"data": [...], "pagination": {...}}`` plus
an ETag / Last-Modified pair; single resources carry the same validators.
Conditional GETs (If-None-Match first, then If-Modified-Since) short-circuit
to an empty 304.
"""
import hashlib
from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from flask import jsonify, make_response, request
from werkzeug.http import http_date

from phoneshop.config.pagination import normalize_pagination
from phoneshop.errors import ValidationError
from phoneshop.time_utils import to_utc_z

# Last-Modified only has second precision
MODIFIED_SLACK = timedelta(seconds=1)


def apply_pagination(rows: Sequence) -> Tuple[list, int, int, int]:
    """Slice rows by the request's limit/offset; returns (page, total, limit, offset)."""
    try:
        limit, offset = normalize_pagination(request.args.get('limit'), request.args.get('offset'))
    except ValueError as e:
        raise ValidationError(str(e))
    return list(rows[offset:offset + limit]), len(rows), limit, offset


def latest_timestamp(rows: Iterable[Any]) -> Optional[datetime]:
    stamps = [r.updated_at for r in rows if getattr(r, 'updated_at', None) is not None]
    return max(stamps) if stamps else None


def _aware(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).replace(microsecond=0)


def compute_etag(ids: Iterable[Any], total: int, limit: int, offset: int, latest_ts: Optional[datetime]) -> str:
    stamp = to_utc_z(_aware(latest_ts)) if latest_ts else ''
    seed = f"{list(ids)}|{total}|{limit}|{offset}|{stamp}"
    return hashlib.sha256(seed.encode()).hexdigest()[:32]


def _validators(etag: str, latest_ts: Optional[datetime]) -> Dict[str, str]:
    headers = {'ETag': etag}
    if latest_ts:
        ts = _aware(latest_ts)
        headers['Last-Modified'] = http_date(ts)
        headers['X-Last-Modified-ISO'] = to_utc_z(ts)
    return headers


def not_modified(etag: str, latest_ts: Optional[datetime]):
    """Return a 304 response when the client's copy is current, else None."""
    if request.if_none_match:
        if not request.if_none_match.contains(etag):
            return None
    elif not (latest_ts and request.if_modified_since
              and _aware(latest_ts) <= _aware(request.if_modified_since) + MODIFIED_SLACK):
        return None
    resp = make_response('', 304)
    resp.headers.update(_validators(etag, latest_ts))
    return resp


def list_response(rows_json: list, total: int, limit: int, offset: int, latest_ts: Optional[datetime] = None):
    etag = compute_etag([r.get('id') for r in rows_json], total, limit, offset, latest_ts)
    cached = not_modified(etag, latest_ts)
    if cached is not None:
        return cached
    resp = make_response(jsonify({
        'data': rows_json,
        'pagination': {'total': total, 'limit': limit, 'offset': offset, 'returned': len(rows_json)},
    }))
    resp.headers.update(_validators(etag, latest_ts))
    return resp


def item_response(body: Dict[str, Any], latest_ts: Optional[datetime] = None):
    etag = compute_etag([body.get('id')], 1, 1, 0, latest_ts)
    cached = not_modified(etag, latest_ts)
    if cached is not None:
        return cached
    resp = make_response(jsonify(body))
    resp.headers.update(_validators(etag, latest_ts))
    return resp
