from __future__ import annotations
import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from phoneshop.analytics.trade_ins import DEFAULT_BUCKETS, trade_in_trends
from phoneshop.models import TradeIn
from phoneshop.services import customers as customer_service
from phoneshop.services.repository import Repository
from phoneshop.time_utils import days_ago, utcnow
from phoneshop.utils.validation import coerce_float, require_fields, pick

logger = logging.getLogger(__name__)

MODEL_BASE_PRICES = {
    'iPhone 14 Pro': 600,
    'iPhone 13': 500,
    'iPhone 12 Pro': 450,
    'Galaxy S23 Ultra': 550,
    'Galaxy S21': 300,
    'Pixel 8 Pro': 400,
    'Pixel 6': 350,
}
DEFAULT_BASE_PRICE = 200
CONDITION_MULTIPLIERS = {'Excellent': 1.0, 'Good': 0.75, 'Fair': 0.5, 'Poor': 0.25}
DEFAULT_MULTIPLIER = 0.5
TRENDS_DEFAULT_DAYS = 90

EDITABLE_FIELDS = ('brand', 'model', 'condition', 'offer_amount', 'accepted')


def repository(session: Session) -> Repository[TradeIn]:
    return Repository(session, TradeIn, label='Trade-in', code_field='trade_in_code')


def evaluate_device(brand: str, model: str, condition: str) -> int:
    """Offer for a device: model base price times the condition multiplier, rounded.

    Brand does not affect the price; unknown models fall back to the default
    base price and unknown conditions to the middle multiplier.
    """
    base = MODEL_BASE_PRICES.get(model, DEFAULT_BASE_PRICE)
    # halves round up: 112.5 -> 113
    return int(math.floor(base * CONDITION_MULTIPLIERS.get(condition, DEFAULT_MULTIPLIER) + 0.5))


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    fields = pick(data, EDITABLE_FIELDS)
    if 'offer_amount' in fields:
        fields['offer_amount'] = coerce_float(fields['offer_amount'], 'offer_amount')
    if 'accepted' in fields:
        fields['accepted'] = bool(fields['accepted'])
    return fields


def list_trade_ins(session: Session) -> List[TradeIn]:
    return sorted(repository(session).get_all(), key=lambda t: t.timestamp, reverse=True)


def get_trade_in(session: Session, trade_in_id: Any) -> TradeIn:
    return repository(session).get_by_id(trade_in_id)


def create_trade_in(session: Session, data: Dict[str, Any]) -> TradeIn:
    require_fields(data, 'brand', 'model', 'condition')
    fields = _clean(data)
    if data.get('customer_id') not in (None, ''):
        fields['customer_id'] = customer_service.get_customer(session, data['customer_id']).id
    if 'offer_amount' not in fields:
        fields['offer_amount'] = float(evaluate_device(fields['brand'], fields['model'], fields['condition']))
    fields['timestamp'] = utcnow()
    trade_in = repository(session).create(fields)
    session.commit()
    logger.info("trade-in %s recorded, offer %.2f", trade_in.trade_in_code, trade_in.offer_amount)
    return trade_in


def update_trade_in(session: Session, trade_in_id: Any, data: Dict[str, Any]) -> TradeIn:
    trade_in = repository(session).update(trade_in_id, _clean(data))
    session.commit()
    return trade_in


def trade_ins_by_customer(session: Session, customer_id: Any) -> List[TradeIn]:
    return [t for t in list_trade_ins(session) if str(t.customer_id) == str(customer_id)]


def trends(session: Session, start: Optional[datetime] = None, end: Optional[datetime] = None,
           buckets: int = DEFAULT_BUCKETS) -> Dict[str, Any]:
    """Trade-in timeline; defaults to the last 90 days ending now."""
    end = end or utcnow()
    start = start or days_ago(TRENDS_DEFAULT_DAYS, end)
    return trade_in_trends(repository(session).get_all(), start, end, buckets)
