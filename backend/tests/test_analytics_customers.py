from datetime import datetime

import pytest

from phoneshop.analytics.customers import customer_lifetime_value
from phoneshop.models import Customer, Sale


def _customer(id, name):
    return Customer(id=id, customer_code=f'CUST{id:03d}', name=name, email=f'{name.lower()}@example.com')


def test_two_sales_average_order_value():
    c = _customer(1, 'Ann')
    sales = [
        Sale(id=1, customer_id=1, total=100.0, timestamp=datetime(2025, 1, 1), items=[]),
        Sale(id=2, customer_id=1, total=50.0, timestamp=datetime(2025, 2, 1), items=[]),
    ]
    [row] = customer_lifetime_value(sales, [c])
    assert row['total_spent'] == 150.0
    assert row['purchase_count'] == 2
    assert row['average_order_value'] == 75.0
    assert row['first_purchase'] == datetime(2025, 1, 1)
    assert row['last_purchase'] == datetime(2025, 2, 1)


def test_sorted_by_total_and_only_buyers_listed():
    customers = [_customer(1, 'Ann'), _customer(2, 'Bob'), _customer(3, 'Cy')]
    sales = [
        Sale(id=1, customer_id=1, total=20.0, timestamp=datetime(2025, 1, 1), items=[]),
        Sale(id=2, customer_id=2, total=500.0, timestamp=datetime(2025, 1, 2), items=[]),
        Sale(id=3, customer_id=42, total=900.0, timestamp=datetime(2025, 1, 3), items=[]),
    ]
    rows = customer_lifetime_value(sales, customers)
    assert [r['name'] for r in rows] == ['Bob', 'Ann']


def test_no_sales_no_rows():
    assert customer_lifetime_value([], [_customer(1, 'Ann')]) == []


def test_totals_match_each_customers_own_sales():
    customers = [_customer(1, 'Ann'), _customer(2, 'Bob'), _customer(3, 'Cy')]
    sales = [
        Sale(id=i, customer_id=cid, total=total, timestamp=datetime(2025, 1, i), items=[])
        for i, (cid, total) in enumerate([(1, 19.99), (2, 250.0), (1, 5.01), (3, 75.5), (2, 0.0), (1, 100.0)], start=1)
    ]
    rows = customer_lifetime_value(sales, customers)
    assert len(rows) == 3
    for row in rows:
        own = [s for s in sales if s.customer_id == row['customer_id']]
        assert row['total_spent'] == pytest.approx(sum(s.total for s in own))
        assert row['purchase_count'] == len(own)
        assert row['average_order_value'] == pytest.approx(row['total_spent'] / len(own))
    assert [r['total_spent'] for r in rows] == sorted((r['total_spent'] for r in rows), reverse=True)
