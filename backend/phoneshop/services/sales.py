from __future__ import annotations
"""Point-of-sale service.

complete_sale is the only way a Sale is written: stock decrement, sale insert
and the customer's purchase history change commit together or not at all.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from phoneshop.analytics import reorder
from phoneshop.analytics.sales import total_revenue as _total_revenue
from phoneshop.errors import ValidationError
from phoneshop.models import Sale
from phoneshop.services import customers as customer_service
from phoneshop.services import devices as device_service
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.validation import coerce_int, coerce_float, validate_status

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 0.08


def repository(session: Session) -> Repository[Sale]:
    return Repository(session, Sale, label='Sale', code_field='sale_code')


def compute_totals(lines: Sequence[Dict[str, Any]], discount_pct: float, tax_rate: float) -> Dict[str, float]:
    """Discount is a percentage of the subtotal; tax applies after discount."""
    subtotal = sum(float(l['price']) * int(l['quantity']) for l in lines)
    discount_amount = subtotal * (discount_pct / 100)
    after_discount = subtotal - discount_amount
    tax = after_discount * tax_rate
    return {
        'subtotal': round(subtotal, 2),
        'discount_amount': round(discount_amount, 2),
        'tax': round(tax, 2),
        'total': round(after_discount + tax, 2),
    }


def list_sales(session: Session) -> List[Sale]:
    return sorted(repository(session).get_all(), key=lambda s: s.timestamp, reverse=True)


def get_sale(session: Session, sale_id: Any) -> Sale:
    return repository(session).get_by_id(sale_id)


def recent_sales(session: Session, limit: int = 10) -> List[Sale]:
    return list_sales(session)[:limit]


def sales_by_customer(session: Session, customer_id: Any) -> List[Sale]:
    customer = customer_service.get_customer(session, customer_id)
    return [s for s in list_sales(session) if s.customer_id == customer.id]


def total_revenue(session: Session) -> float:
    return _total_revenue(repository(session).get_all())


def sales_velocity(session: Session, now: Optional[datetime] = None, window_days: int = reorder.DEFAULT_WINDOW_DAYS) -> Dict[int, float]:
    return reorder.sales_velocity(repository(session).get_all(), now or utcnow(), window_days)


def complete_sale(session: Session, data: Dict[str, Any], tax_rate: float = DEFAULT_TAX_RATE) -> Sale:
    items = data.get('items') or []
    if not items:
        raise ValidationError('Cart is empty')
    if data.get('customer_id') in (None, ''):
        raise ValidationError('customer_id required')
    discount = min(100.0, max(0.0, coerce_float(data.get('discount', 0), 'discount', default=0.0)))
    payment_method = validate_status(data.get('payment_method') or Sale.PAYMENT_CASH, Sale.ALL_PAYMENT_METHODS, 'payment_method')

    try:
        customer = customer_service.get_customer(session, data['customer_id'])
        lines = []
        for raw in items:
            device = device_service.get_device(session, raw.get('device_id'))
            quantity = coerce_int(raw.get('quantity', 1), 'quantity', minimum=1)
            price = coerce_float(raw.get('price', device.sale_price), 'price')
            device_service.adjust_stock(device, -quantity)
            lines.append({'device_id': device.id, 'name': device.display_name, 'quantity': quantity, 'price': price})
        totals = compute_totals(lines, discount, tax_rate)
        sale = repository(session).create({
            'customer_id': customer.id,
            'items': lines,
            'subtotal': totals['subtotal'],
            'tax': totals['tax'],
            'discount': discount,
            'total': totals['total'],
            'payment_method': payment_method,
            'timestamp': utcnow(),
        })
        customer_service.append_history(customer, 'purchase_history', sale.id)
        session.commit()
    except Exception:
        session.rollback()
        logger.warning("sale for customer %s rolled back", data.get('customer_id'))
        raise
    logger.info("sale %s completed: %d lines, total %.2f", sale.sale_code, len(lines), sale.total)
    return sale
