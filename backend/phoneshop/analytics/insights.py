from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Iterable

from phoneshop.analytics.customers import customer_lifetime_value
from phoneshop.analytics.sales import seasonal_patterns
from phoneshop.analytics.trade_ins import DEFAULT_BUCKETS, trade_in_trends

TOP_CUSTOMERS = 10


def business_insights(sales: Iterable[Any], customers: Iterable[Any], trade_ins: Iterable[Any],
                      start: datetime, end: datetime, buckets: int = DEFAULT_BUCKETS) -> Dict[str, Any]:
    """Combined view: trade-in trends over [start, end], CLV leaderboard and seasonality."""
    sales = list(sales)
    trends = trade_in_trends(trade_ins, start, end, buckets)
    clv = customer_lifetime_value(sales, customers)
    seasonal = seasonal_patterns(sales)
    top = clv[:TOP_CUSTOMERS]
    return {
        'trade_in_trends': trends,
        'customer_clv': top,
        'seasonal_patterns': seasonal,
        'total_trade_in_value': trends['total_value'],
        'average_clv': sum(c['total_spent'] for c in clv) / len(clv) if clv else 0,
        'top_customer_clv': clv[0]['total_spent'] if clv else 0,
        'average_purchase_frequency': sum(c['purchase_count'] for c in top) / len(top) if top else 0,
        'peak_month': seasonal['peak_month'],
        'peak_season': seasonal['peak_season'],
    }
