from __future__ import annotations
"""Supplier orders, their lifecycle and the reorder suggestion workflow.

Status flow is Pending -> Ordered -> Received, with Cancelled reachable from
Pending and Ordered. Receiving an order is the only path that adds stock.
"""
import logging
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from phoneshop.analytics import reorder
from phoneshop.analytics.suppliers import supplier_performance as _supplier_performance
from phoneshop.errors import InvalidReferenceError, InvalidTransitionError, ValidationError
from phoneshop.models import Device, ReorderDismissal, Supplier, SupplierOrder
from phoneshop.services import devices as device_service
from phoneshop.services import sales as sale_service
from phoneshop.services import suppliers as supplier_service
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.fsm import TransitionValidator
from phoneshop.utils.validation import coerce_datetime, coerce_float, coerce_int, validate_status

logger = logging.getLogger(__name__)

SUPPLIER_ORDER_FSM = TransitionValidator({
    SupplierOrder.STATUS_PENDING: {SupplierOrder.STATUS_ORDERED, SupplierOrder.STATUS_CANCELLED},
    SupplierOrder.STATUS_ORDERED: {SupplierOrder.STATUS_RECEIVED, SupplierOrder.STATUS_CANCELLED},
    SupplierOrder.STATUS_RECEIVED: set(),
    SupplierOrder.STATUS_CANCELLED: set(),
})

# lead time assumed when a suggestion is approved without an expected delivery
SUGGESTION_LEAD_DAYS = 7


def repository(session: Session) -> Repository[SupplierOrder]:
    return Repository(session, SupplierOrder, label='Supplier order')


def order_total(items: List[Dict[str, Any]]) -> float:
    return round(sum(int(i['quantity']) * float(i['unit_cost']) for i in items), 2)


def _require_supplier(session: Session, supplier_id: Any) -> Supplier:
    supplier = supplier_service.repository(session).get(supplier_id)
    if supplier is None:
        raise InvalidReferenceError("Invalid supplier ID - supplier not found")
    return supplier


def _clean_items(session: Session, items: Any) -> List[Dict[str, Any]]:
    if not isinstance(items, list) or not items:
        raise ValidationError("items required")
    devices = device_service.repository(session)
    out = []
    for raw in items:
        device = devices.get(raw.get('device_id'))
        if device is None:
            raise InvalidReferenceError(f"Invalid device ID {raw.get('device_id')} - device not found")
        out.append({
            'device_id': device.id,
            'quantity': coerce_int(raw.get('quantity'), 'quantity', minimum=1),
            'unit_cost': coerce_float(raw.get('unit_cost', device.cost), 'unit_cost'),
        })
    return out


def list_orders(session: Session) -> List[SupplierOrder]:
    return sorted(repository(session).get_all(), key=lambda o: o.order_date, reverse=True)


def get_order(session: Session, order_id: Any) -> SupplierOrder:
    return repository(session).get_by_id(order_id)


def orders_by_supplier(session: Session, supplier_id: Any) -> List[SupplierOrder]:
    return [o for o in list_orders(session) if str(o.supplier_id) == str(supplier_id)]


def create_order(session: Session, data: Dict[str, Any]) -> SupplierOrder:
    """Create a Pending order; the supplier and every device must exist."""
    supplier = _require_supplier(session, data.get('supplier_id'))
    items = _clean_items(session, data.get('items'))
    order = repository(session).create({
        'supplier_id': supplier.id,
        'order_date': utcnow(),
        'expected_delivery': coerce_datetime(data.get('expected_delivery'), 'expected_delivery'),
        'status': SupplierOrder.STATUS_PENDING,
        'items': items,
        'total_cost': order_total(items),
        'notes': data.get('notes') or '',
    })
    session.commit()
    logger.info("supplier order %s created for supplier %s (%.2f)", order.id, supplier.id, order.total_cost)
    return order


def update_order(session: Session, order_id: Any, data: Dict[str, Any]) -> SupplierOrder:
    order = get_order(session, order_id)
    changes: Dict[str, Any] = {}
    if 'supplier_id' in data:
        changes['supplier_id'] = _require_supplier(session, data['supplier_id']).id
    if 'items' in data:
        changes['items'] = _clean_items(session, data['items'])
        changes['total_cost'] = order_total(changes['items'])
    if 'expected_delivery' in data:
        changes['expected_delivery'] = coerce_datetime(data['expected_delivery'], 'expected_delivery')
    if 'notes' in data:
        changes['notes'] = data['notes'] or ''
    repository(session).update(order.id, changes, immutable=('order_date', 'status'))
    if data.get('status') and data['status'] != order.status:
        return _transition(session, order, data['status'])
    session.commit()
    return order


def delete_order(session: Session, order_id: Any) -> None:
    repository(session).delete(order_id)
    session.commit()
    logger.info("supplier order %s deleted", order_id)


def _transition(session: Session, order: SupplierOrder, status: str, now: Optional[datetime] = None) -> SupplierOrder:
    validate_status(status, SupplierOrder.ALL_STATUSES)
    try:
        SUPPLIER_ORDER_FSM.assert_can_transition(order.status, status)
        if status == SupplierOrder.STATUS_RECEIVED:
            devices = device_service.repository(session)
            for item in order.items or []:
                device = devices.get(item['device_id'])
                if device is None:
                    raise InvalidReferenceError(f"Invalid device ID {item['device_id']} - device not found")
                device_service.adjust_stock(device, int(item['quantity']))
            order.received_date = now or utcnow()
        previous = order.status
        order.status = status
        session.commit()
    except (InvalidTransitionError, InvalidReferenceError):
        session.rollback()
        logger.warning("supplier order %s: rejected %s -> %s", order.id, order.status, status)
        raise
    logger.info("supplier order %s: %s -> %s", order.id, previous, status)
    return order


def place_order(session: Session, order_id: Any) -> SupplierOrder:
    return _transition(session, get_order(session, order_id), SupplierOrder.STATUS_ORDERED)


def receive_order(session: Session, order_id: Any, now: Optional[datetime] = None) -> SupplierOrder:
    """Mark an Ordered order Received and add every line to stock."""
    return _transition(session, get_order(session, order_id), SupplierOrder.STATUS_RECEIVED, now)


def cancel_order(session: Session, order_id: Any) -> SupplierOrder:
    return _transition(session, get_order(session, order_id), SupplierOrder.STATUS_CANCELLED)


def suggested_items(session: Session, now: Optional[datetime] = None,
                    window_days: int = reorder.DEFAULT_WINDOW_DAYS) -> List[Dict[str, Any]]:
    velocity = sale_service.sales_velocity(session, now, window_days)
    return reorder.suggested_items(device_service.list_devices(session), velocity, window_days)


def dismissed_devices(session: Session) -> set:
    return {d.device_id for d in session.query(ReorderDismissal).all()}


def auto_suggestions(session: Session, now: Optional[datetime] = None,
                     window_days: int = reorder.DEFAULT_WINDOW_DAYS) -> List[Dict[str, Any]]:
    """Suggested items minus the devices whose suggestion was dismissed."""
    dismissed = dismissed_devices(session)
    return [s for s in suggested_items(session, now, window_days) if s['device_id'] not in dismissed]


def dismiss_suggestion(session: Session, device_id: Any) -> None:
    device = device_service.get_device(session, device_id)
    if session.get(ReorderDismissal, device.id) is None:
        session.add(ReorderDismissal(device_id=device.id, dismissed_at=utcnow()))
    session.commit()
    logger.info("reorder suggestion for device %s dismissed", device.id)


def approve_suggestion(session: Session, device_id: Any, data: Optional[Dict[str, Any]] = None,
                       now: Optional[datetime] = None, window_days: int = reorder.DEFAULT_WINDOW_DAYS) -> SupplierOrder:
    """Turn a device's reorder suggestion into a Pending supplier order.

    The supplier comes from the payload or else from the device. Quantity
    defaults to the suggested quantity (at least 1) and unit cost to the
    device cost.
    """
    data = data or {}
    device: Device = device_service.get_device(session, device_id)
    supplier_id = data.get('supplier_id') or device.supplier_id
    if supplier_id in (None, ''):
        raise ValidationError("supplier_id required - device has no default supplier")
    velocity = sale_service.sales_velocity(session, now, window_days).get(device.id, 0)
    suggestion = reorder.evaluate_device(device, velocity, window_days)
    quantity = data.get('quantity') or max(1, suggestion['suggested_quantity'])
    created_at = now or utcnow()
    order = create_order(session, {
        'supplier_id': supplier_id,
        'items': [{'device_id': device.id, 'quantity': quantity, 'unit_cost': data.get('unit_cost', device.cost)}],
        'expected_delivery': data.get('expected_delivery') or created_at + timedelta(days=SUGGESTION_LEAD_DAYS),
        'notes': data.get('notes') or f"Auto-generated reorder for {device.display_name}",
    })
    dismissal = session.get(ReorderDismissal, device.id)
    if dismissal is not None:
        session.delete(dismissal)
        session.commit()
    return order


def supplier_performance(session: Session) -> List[Dict[str, Any]]:
    return _supplier_performance(repository(session).get_all(), supplier_service.list_suppliers(session))
