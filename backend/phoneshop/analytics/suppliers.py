from __future__ import annotations
from typing import Any, Dict, Iterable, List

RECEIVED = 'Received'


def supplier_performance(orders: Iterable[Any], suppliers: Iterable[Any]) -> List[Dict[str, Any]]:
    """Delivery metrics for every supplier that has at least one order."""
    orders = list(orders)
    out = []
    for supplier in suppliers:
        mine = [o for o in orders if o.supplier_id == supplier.id]
        if not mine:
            continue
        received = [o for o in mine if o.status == RECEIVED and o.received_date is not None]
        on_time = [
            o for o in received
            if o.expected_delivery is None or o.received_date.date() <= o.expected_delivery.date()
        ]
        delivery_days = [(o.received_date - o.order_date).total_seconds() / 86400 for o in received]
        out.append({
            'supplier_id': supplier.id,
            'supplier_name': supplier.name,
            'total_orders': len(mine),
            'completed_orders': len(received),
            'order_completion_rate': len(received) / len(mine) * 100,
            'on_time_delivery_rate': len(on_time) / len(received) * 100 if received else 0,
            'avg_delivery_days': sum(delivery_days) / len(delivery_days) if delivery_days else 0,
            'total_spend': sum(float(o.total_cost or 0) for o in received),
        })
    return out
