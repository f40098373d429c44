from __future__ import annotations
"""Reorder suggestion engine.

Projects how long current stock lasts at the trailing sales velocity and
proposes a top-up to a window's worth of demand. Read-only: turning a
suggestion into a supplier order is the caller's job.
"""
import math
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Mapping

DEFAULT_WINDOW_DAYS = 30
# days of stock reported for devices that are not selling
NO_RUNOUT_DAYS = 999
HIGH_PRIORITY_DAYS = 14

PRIORITY_HIGH = 'high'
PRIORITY_MEDIUM = 'medium'
PRIORITY_LOW = 'low'
PRIORITY_RANK = {PRIORITY_HIGH: 0, PRIORITY_MEDIUM: 1, PRIORITY_LOW: 2}


def sales_velocity(sales: Iterable[Any], now: datetime, window_days: int = DEFAULT_WINDOW_DAYS) -> Dict[int, float]:
    """Units sold per day for each device over the trailing window ending at now."""
    cutoff = now - timedelta(days=window_days)
    units: Dict[int, int] = defaultdict(int)
    for sale in sales:
        if not (cutoff <= sale.timestamp <= now):
            continue
        for item in sale.items or []:
            device_id = item.get('device_id')
            if device_id is None:
                continue
            units[int(device_id)] += int(item.get('quantity') or 0)
    return {device_id: qty / window_days for device_id, qty in units.items()}


def classify_priority(velocity: float, days_of_stock: float, window_days: int = DEFAULT_WINDOW_DAYS) -> str:
    if velocity > 0 and days_of_stock < HIGH_PRIORITY_DAYS:
        return PRIORITY_HIGH
    if velocity > 0 and days_of_stock < window_days:
        return PRIORITY_MEDIUM
    return PRIORITY_LOW


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def evaluate_device(device: Any, velocity: float, window_days: int = DEFAULT_WINDOW_DAYS) -> Dict[str, Any]:
    stock = int(device.quantity or 0)
    velocity = max(0.0, float(velocity or 0))
    days_of_stock = stock / velocity if velocity > 0 else NO_RUNOUT_DAYS
    # round before ceil so float noise (19.999999999999996) does not add a unit
    projected = math.ceil(round(velocity * window_days, 9))
    return {
        'device_id': device.id,
        'device_name': device.display_name,
        'brand': device.brand,
        'model': device.model,
        'supplier_id': device.supplier_id,
        'current_stock': stock,
        'sales_velocity': velocity,
        'days_of_stock': _round_half_up(days_of_stock),
        'suggested_quantity': max(0, projected - stock),
        'estimated_cost': float(device.cost or 0),
        'priority': classify_priority(velocity, days_of_stock, window_days),
        'needs_reorder': days_of_stock < window_days and velocity > 0,
    }


def reorder_suggestions(devices: Iterable[Any], velocity: Mapping[int, float], window_days: int = DEFAULT_WINDOW_DAYS) -> List[Dict[str, Any]]:
    """Evaluate every device, needs_reorder or not, in device order."""
    return [evaluate_device(d, velocity.get(d.id, 0), window_days) for d in devices]


def suggested_items(devices: Iterable[Any], velocity: Mapping[int, float], window_days: int = DEFAULT_WINDOW_DAYS) -> List[Dict[str, Any]]:
    """Devices that need reordering, most urgent first.

    Ordered by priority (high, medium, low) then by ascending days of stock.
    Zero-velocity devices never qualify, whatever their stock.
    """
    flagged = [s for s in reorder_suggestions(devices, velocity, window_days) if s['needs_reorder']]
    # flagged rows always have velocity > 0; sort on unrounded days of stock
    flagged.sort(key=lambda s: (PRIORITY_RANK[s['priority']], s['current_stock'] / s['sales_velocity']))
    return flagged


__all__ = [
    'sales_velocity', 'classify_priority', 'evaluate_device', 'reorder_suggestions', 'suggested_items',
    'NO_RUNOUT_DAYS', 'PRIORITY_RANK',
]
