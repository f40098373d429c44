from datetime import datetime

from phoneshop.analytics.dashboard import dashboard_summary
from phoneshop.analytics.insights import business_insights
from phoneshop.analytics.suppliers import supplier_performance
from phoneshop.models import Customer, Device, RepairTicket, Sale, Supplier, SupplierOrder, TradeIn

NOW = datetime(2025, 6, 30, 15, 0)


def test_supplier_performance_rates():
    sup = Supplier(id=1, supplier_code='SUP001', name='Acme')
    idle = Supplier(id=2, supplier_code='SUP002', name='Idle')
    orders = [
        SupplierOrder(id=1, supplier_id=1, status='Received', order_date=datetime(2025, 1, 1),
                      expected_delivery=datetime(2025, 1, 5), received_date=datetime(2025, 1, 4), total_cost=100.0),
        SupplierOrder(id=2, supplier_id=1, status='Received', order_date=datetime(2025, 2, 1),
                      expected_delivery=datetime(2025, 2, 3), received_date=datetime(2025, 2, 7), total_cost=50.0),
        SupplierOrder(id=3, supplier_id=1, status='Ordered', order_date=datetime(2025, 3, 1), total_cost=10.0),
        SupplierOrder(id=4, supplier_id=1, status='Cancelled', order_date=datetime(2025, 3, 2), total_cost=10.0),
    ]
    [row] = supplier_performance(orders, [sup, idle])
    assert row['supplier_id'] == 1
    assert row['total_orders'] == 4
    assert row['completed_orders'] == 2
    assert row['order_completion_rate'] == 50.0
    assert row['on_time_delivery_rate'] == 50.0
    assert row['avg_delivery_days'] == 4.5
    assert row['total_spend'] == 150.0


def test_dashboard_counts():
    sales = [
        Sale(id=1, total=100.0, timestamp=datetime(2025, 6, 30, 9), items=[]),
        Sale(id=2, total=40.0, timestamp=datetime(2025, 6, 29, 18), items=[]),
    ]
    devices = [
        Device(id=1, brand='A', model='1', quantity=0),
        Device(id=2, brand='A', model='2', quantity=3),
        Device(id=3, brand='A', model='3', quantity=30),
    ]
    repairs = [RepairTicket(id=1, status='Received'), RepairTicket(id=2, status='Completed'), RepairTicket(id=3, status='In Progress')]
    d = dashboard_summary(sales, devices, repairs, NOW, low_stock_threshold=10)
    assert d['total_revenue'] == 140.0
    assert d['today_revenue'] == 100.0
    assert d['today_sales'] == 1
    assert d['low_stock_count'] == 1
    assert d['out_of_stock_count'] == 1
    assert d['active_repairs'] == 2
    assert d['recent_sale_ids'] == [1, 2]


def test_business_insights_combines_views():
    customers = [Customer(id=1, customer_code='CUST001', name='Ann', email=''),
                 Customer(id=2, customer_code='CUST002', name='Bob', email='')]
    sales = [
        Sale(id=1, customer_id=1, total=300.0, timestamp=datetime(2025, 6, 1), items=[]),
        Sale(id=2, customer_id=2, total=100.0, timestamp=datetime(2025, 6, 2), items=[]),
        Sale(id=3, customer_id=2, total=100.0, timestamp=datetime(2025, 1, 2), items=[]),
    ]
    trades = [TradeIn(id=1, brand='A', model='B', condition='Good', offer_amount=80.0, accepted=True, timestamp=datetime(2025, 6, 10))]
    out = business_insights(sales, customers, trades, datetime(2025, 4, 1), NOW)
    assert out['top_customer_clv'] == 300.0
    assert out['average_clv'] == 250.0
    assert out['average_purchase_frequency'] == 1.5
    assert out['total_trade_in_value'] == 80.0
    assert out['peak_month'] == '2025-06'
    assert out['peak_season'] == 'Summer'
    assert [c['name'] for c in out['customer_clv']] == ['Ann', 'Bob']
