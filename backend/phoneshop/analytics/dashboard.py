from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Iterable

from phoneshop.time_utils import start_of_day

ACTIVE_EXCLUDED = ('Completed', 'Cancelled')


def is_low_stock(device: Any, threshold: int) -> bool:
    return 0 < int(device.quantity or 0) < threshold


def dashboard_summary(sales: Iterable[Any], devices: Iterable[Any], repairs: Iterable[Any], now: datetime, low_stock_threshold: int = 10) -> Dict[str, Any]:
    sales = list(sales)
    devices = list(devices)
    today = start_of_day(now)
    recent = sorted(sales, key=lambda s: s.timestamp, reverse=True)[:5]
    return {
        'total_revenue': sum(float(s.total or 0) for s in sales),
        'today_revenue': sum(float(s.total or 0) for s in sales if s.timestamp >= today),
        'today_sales': sum(1 for s in sales if s.timestamp >= today),
        'low_stock_count': sum(1 for d in devices if is_low_stock(d, low_stock_threshold)),
        'out_of_stock_count': sum(1 for d in devices if int(d.quantity or 0) == 0),
        'active_repairs': sum(1 for r in repairs if r.status not in ACTIVE_EXCLUDED),
        'recent_sale_ids': [s.id for s in recent],
    }
