from __future__ import annotations
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

TOP_PRODUCTS_LIMIT = 5

# Calendar month -> season bucket
SEASON_BY_MONTH = {
    12: 'Winter', 1: 'Winter', 2: 'Winter',
    3: 'Spring', 4: 'Spring', 5: 'Spring',
    6: 'Summer', 7: 'Summer', 8: 'Summer',
    9: 'Fall', 10: 'Fall', 11: 'Fall',
}
SEASON_ORDER = ('Winter', 'Spring', 'Summer', 'Fall')


def sales_in_range(sales: Iterable[Any], start: datetime, end: datetime) -> List[Any]:
    """Sales whose timestamp lies in [start, end], boundaries included."""
    return [s for s in sales if start <= s.timestamp <= end]


def top_products(sales: Iterable[Any], limit: int = TOP_PRODUCTS_LIMIT) -> List[Dict[str, Any]]:
    """Rank line items by units sold, grouped by product name.

    Ties keep the order in which a name was first seen.
    """
    products: Dict[str, Dict[str, Any]] = {}
    for sale in sales:
        for item in sale.items or []:
            name = item.get('name')
            entry = products.setdefault(name, {'name': name, 'quantity': 0, 'revenue': 0.0})
            quantity = int(item.get('quantity') or 0)
            entry['quantity'] += quantity
            entry['revenue'] += float(item.get('price') or 0) * quantity
    ranked = sorted(products.values(), key=lambda p: p['quantity'], reverse=True)
    return ranked[:limit]


def sales_summary(sales: Sequence[Any], start: datetime, end: datetime) -> Dict[str, Any]:
    filtered = sales_in_range(sales, start, end)
    total_revenue = sum(float(s.total or 0) for s in filtered)
    return {
        'start': start,
        'end': end,
        'total_sales': len(filtered),
        'total_revenue': total_revenue,
        'average_transaction': total_revenue / len(filtered) if filtered else 0,
        'top_products': top_products(filtered),
    }


def total_revenue(sales: Iterable[Any]) -> float:
    return sum(float(s.total or 0) for s in sales)


def _first_max(rows: Sequence[Dict[str, Any]], key: Callable[[Dict[str, Any]], float]) -> Optional[Dict[str, Any]]:
    best = None
    for row in rows:
        if best is None or key(row) > key(best):
            best = row
    return best


def seasonal_patterns(sales: Sequence[Any]) -> Dict[str, Any]:
    """Bucket every sale by calendar month and by season.

    Returns monthly rows in chronological order, the four season rows in fixed
    Winter/Spring/Summer/Fall order and the peak month / season keys (first
    maximum wins, None without sales).
    """
    monthly: Dict[str, Dict[str, Any]] = {}
    seasons = {name: {'season': name, 'revenue': 0.0, 'count': 0} for name in SEASON_ORDER}
    for sale in sales:
        amount = float(sale.total or 0)
        key = sale.timestamp.strftime('%Y-%m')
        bucket = monthly.setdefault(key, {'month': key, 'revenue': 0.0, 'count': 0})
        bucket['revenue'] += amount
        bucket['count'] += 1
        season = seasons[SEASON_BY_MONTH[sale.timestamp.month]]
        season['revenue'] += amount
        season['count'] += 1

    monthly_revenue = [monthly[k] for k in sorted(monthly)]
    seasonal_revenue = [seasons[name] for name in SEASON_ORDER]
    peak_month = _first_max(monthly_revenue, lambda m: m['revenue'])
    peak_season = _first_max(seasonal_revenue, lambda s: s['revenue']) if sales else None
    return {
        'monthly_revenue': monthly_revenue,
        'seasonal_revenue': seasonal_revenue,
        'peak_month': peak_month['month'] if peak_month else None,
        'peak_season': peak_season['season'] if peak_season else None,
    }


__all__ = ['sales_in_range', 'top_products', 'sales_summary', 'total_revenue', 'seasonal_patterns', 'SEASON_BY_MONTH']
