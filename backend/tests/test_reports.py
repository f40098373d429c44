import pytest

from phoneshop.time_utils import utcnow
from tests.test_lifecycle_helpers import make_customer, make_device, make_sale


def test_sales_summary_range(client, seeded):
    body = client.get('/reports/sales-summary?start=2025-01-01&end=2025-03-31').get_json()
    assert body['start'] == '2025-01-01T00:00:00Z'
    assert body['total_sales'] == 3
    assert body['total_revenue'] == pytest.approx(3273.57)
    assert body['average_transaction'] == pytest.approx(1091.19)
    assert body['top_products'][0] == {'name': 'Clear Case - iPhone 14 Pro', 'quantity': 2, 'revenue': pytest.approx(59.98)}


def test_sales_summary_default_window_can_be_empty(client, seeded):
    body = client.get('/reports/sales-summary?end=2024-01-01').get_json()
    assert body['total_sales'] == 0
    assert body['average_transaction'] == 0


def test_seasonal(client, seeded):
    body = client.get('/reports/seasonal').get_json()
    assert body['peak_month'] == '2025-02'
    assert body['peak_season'] == 'Winter'
    assert [m['month'] for m in body['monthly_revenue']] == ['2025-01', '2025-02', '2025-03', '2025-06', '2025-07', '2025-09']


def test_clv(client, seeded):
    rows = client.get('/reports/clv').get_json()['data']
    assert [r['customer_code'] for r in rows] == ['CUST001', 'CUST002', 'CUST003', 'CUST005', 'CUST004']
    assert rows[0]['total_spent'] == pytest.approx(1725.84)
    assert rows[0]['purchase_count'] == 2
    assert rows[0]['first_purchase'] == '2025-01-15T14:30:00Z'
    assert len(client.get('/reports/clv?limit=2').get_json()['data']) == 2


def test_dashboard(client, seeded):
    body = client.get('/reports/dashboard').get_json()
    assert body['total_revenue'] == pytest.approx(4445.93)
    assert body['low_stock_count'] == 5
    assert body['out_of_stock_count'] == 1
    assert body['active_repairs'] == 2
    assert body['recent_sale_ids'][0] == 6


def test_insights(client, seeded):
    body = client.get('/reports/insights?start=2025-01-01&end=2025-03-31').get_json()
    assert body['trade_in_trends']['total_trade_ins'] == 3
    assert body['total_trade_in_value'] == 688.0
    assert body['top_customer_clv'] == pytest.approx(1725.84)
    assert body['peak_season'] == 'Winter'
    assert len(body['customer_clv']) == 5


def test_bad_date_parameter(client):
    resp = client.get('/reports/sales-summary?start=31/01/2025')
    assert resp.status_code == 400


def test_date_only_end_covers_the_whole_day(client):
    customer = make_customer(client)
    device = make_device(client, quantity=5)
    make_sale(client, customer['id'], device['id'])
    today = utcnow().date().isoformat()
    body = client.get(f'/reports/sales-summary?start={today}&end={today}').get_json()
    assert body['total_sales'] == 1
    assert body['end'] == f'{today}T23:59:59Z'
