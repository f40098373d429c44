from __future__ import annotations
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from phoneshop.errors import NotFoundError, ValidationError
from phoneshop.models import Device
from phoneshop.services.repository import Repository
from phoneshop.time_utils import utcnow
from phoneshop.utils.validation import require_fields, coerce_int, coerce_float, pick

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = (
    'name', 'brand', 'model', 'category', 'condition', 'quantity', 'sale_price', 'cost',
    'low_stock_threshold', 'imei', 'serial_number', 'supplier_id',
)


def repository(session: Session) -> Repository[Device]:
    return Repository(session, Device, label='Device')


def _clean(data: Dict[str, Any]) -> Dict[str, Any]:
    fields = pick(data, EDITABLE_FIELDS)
    for key in ('quantity', 'low_stock_threshold'):
        if key in fields:
            fields[key] = coerce_int(fields[key], key, minimum=0)
    for key in ('sale_price', 'cost'):
        if key in fields:
            fields[key] = coerce_float(fields[key], key)
    if fields.get('supplier_id') is not None:
        fields['supplier_id'] = coerce_int(fields['supplier_id'], 'supplier_id')
    return fields


def list_devices(session: Session) -> List[Device]:
    return repository(session).get_all()


def get_device(session: Session, device_id: Any) -> Device:
    return repository(session).get_by_id(device_id)


def get_by_imei(session: Session, imei: str) -> Device:
    device = repository(session).find_one(imei=imei)
    if device is None:
        raise NotFoundError("Device not found")
    return device


def create_device(session: Session, data: Dict[str, Any]) -> Device:
    require_fields(data, 'brand', 'model')
    fields = _clean(data)
    fields['date_added'] = utcnow()
    device = repository(session).create(fields)
    session.commit()
    logger.info("device %s created (%s)", device.id, device.display_name)
    return device


def update_device(session: Session, device_id: Any, data: Dict[str, Any]) -> Device:
    device = repository(session).update(device_id, _clean(data))
    session.commit()
    return device


def update_stock(session: Session, device_id: Any, quantity: Any) -> Device:
    """Set the absolute stock level."""
    device = get_device(session, device_id)
    device.quantity = coerce_int(quantity, 'quantity', minimum=0)
    session.commit()
    logger.info("device %s stock set to %s", device.id, device.quantity)
    return device


def adjust_stock(device: Device, delta: int) -> None:
    """Apply a relative stock change inside the caller's transaction."""
    new_quantity = int(device.quantity or 0) + int(delta)
    if new_quantity < 0:
        raise ValidationError(f"Insufficient stock for {device.display_name}: {device.quantity} available")
    device.quantity = new_quantity


def delete_device(session: Session, device_id: Any) -> None:
    repository(session).delete(device_id)
    session.commit()
    logger.info("device %s deleted", device_id)


def low_stock(session: Session, threshold: int = 10) -> List[Device]:
    return [d for d in list_devices(session) if 0 < d.quantity < threshold]


def out_of_stock(session: Session) -> List[Device]:
    return [d for d in list_devices(session) if d.quantity == 0]


def current_stock(session: Session) -> Dict[int, int]:
    return {d.id: d.quantity for d in list_devices(session)}
