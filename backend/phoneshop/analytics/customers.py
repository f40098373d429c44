from __future__ import annotations
from typing import Any, Dict, Iterable, List


def customer_lifetime_value(sales: Iterable[Any], customers: Iterable[Any]) -> List[Dict[str, Any]]:
    """Per-customer spend totals, highest spender first.

    Sales are attributed by numeric customer id. Only customers with at least
    one attributed sale appear. Callers slice the result when they only want a
    leaderboard.
    """
    by_id = {c.id: c for c in customers}
    stats: Dict[int, Dict[str, Any]] = {}
    for sale in sales:
        customer = by_id.get(sale.customer_id)
        if customer is None:
            continue
        entry = stats.get(customer.id)
        if entry is None:
            entry = stats[customer.id] = {
                'customer_id': customer.id,
                'customer_code': customer.customer_code,
                'name': customer.name,
                'email': customer.email,
                'total_spent': 0.0,
                'purchase_count': 0,
                'first_purchase': sale.timestamp,
                'last_purchase': sale.timestamp,
            }
        entry['total_spent'] += float(sale.total or 0)
        entry['purchase_count'] += 1
        entry['first_purchase'] = min(entry['first_purchase'], sale.timestamp)
        entry['last_purchase'] = max(entry['last_purchase'], sale.timestamp)

    for entry in stats.values():
        entry['average_order_value'] = entry['total_spent'] / entry['purchase_count']
    return sorted(stats.values(), key=lambda e: e['total_spent'], reverse=True)
