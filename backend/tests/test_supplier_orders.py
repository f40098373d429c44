from tests.test_lifecycle_helpers import (
    assert_error, assert_transition, create_resource_and_assert, exercise_supplier_order_lifecycle,
    make_device, make_supplier,
)


def test_supplier_order_lifecycle_adds_stock(client):
    s = make_supplier(client)
    d = make_device(client, quantity=2)
    exercise_supplier_order_lifecycle(client, s['id'], d['id'])
    assert client.get(f"/inventory/devices/{d['id']}").get_json()['quantity'] == 6


def test_cancel_from_pending_and_ordered(client):
    s = make_supplier(client)
    d = make_device(client)
    payload = {'supplier_id': s['id'], 'items': [{'device_id': d['id'], 'quantity': 1}]}
    first = create_resource_and_assert(client, '/suppliers/orders', payload)
    second = create_resource_and_assert(client, '/suppliers/orders', payload)
    assert_transition(client, f"/suppliers/orders/{first['id']}/cancel", 200, 'Cancelled')
    assert_transition(client, f"/suppliers/orders/{second['id']}/place", 200, 'Ordered')
    assert_transition(client, f"/suppliers/orders/{second['id']}/cancel", 200, 'Cancelled')
    assert_transition(client, f"/suppliers/orders/{second['id']}/receive", 400)
    assert client.get(f"/inventory/devices/{d['id']}").get_json()['quantity'] == 10


def test_create_requires_existing_references(client):
    s = make_supplier(client)
    d = make_device(client)
    resp = client.post('/suppliers/orders', json={'supplier_id': 99, 'items': [{'device_id': d['id'], 'quantity': 1}]})
    assert_error(resp, 400, 'Invalid supplier ID')
    resp = client.post('/suppliers/orders', json={'supplier_id': s['id'], 'items': [{'device_id': 99, 'quantity': 1}]})
    assert_error(resp, 400, 'Invalid device ID')
    assert_error(client.post('/suppliers/orders', json={'supplier_id': s['id'], 'items': []}), 400, 'items')
    assert client.get('/suppliers/orders').get_json()['pagination']['total'] == 0


def test_unit_cost_defaults_to_device_cost(client):
    s = make_supplier(client)
    d = make_device(client, cost=123.0)
    order = create_resource_and_assert(client, '/suppliers/orders', {'supplier_id': s['id'], 'items': [{'device_id': d['id'], 'quantity': 2}]})
    assert order['items'][0]['unit_cost'] == 123.0
    assert order['total_cost'] == 246.0


def test_update_recomputes_total_and_keeps_order_date(client):
    s = make_supplier(client)
    d = make_device(client)
    order = create_resource_and_assert(client, '/suppliers/orders', {'supplier_id': s['id'], 'items': [{'device_id': d['id'], 'quantity': 1, 'unit_cost': 10}]})
    resp = client.put(f"/suppliers/orders/{order['id']}", json={
        'items': [{'device_id': d['id'], 'quantity': 3, 'unit_cost': 20}],
        'order_date': '2001-01-01', 'id': 500, 'notes': 'rush',
    })
    body = resp.get_json()
    assert body['id'] == order['id']
    assert body['total_cost'] == 60.0
    assert body['order_date'] == order['order_date']
    assert body['notes'] == 'rush'
    resp = client.put(f"/suppliers/orders/{order['id']}", json={'status': 'Received'})
    assert_error(resp, 400, 'Pending -> Received')
    resp = client.put(f"/suppliers/orders/{order['id']}", json={'status': 'Ordered'})
    assert resp.get_json()['status'] == 'Ordered'


def test_delete_order(client):
    s = make_supplier(client)
    d = make_device(client)
    order = create_resource_and_assert(client, '/suppliers/orders', {'supplier_id': s['id'], 'items': [{'device_id': d['id'], 'quantity': 1}]})
    assert client.delete(f"/suppliers/orders/{order['id']}").get_json() == {'success': True}
    assert_error(client.get(f"/suppliers/orders/{order['id']}"), 404, 'Supplier order not found')


def test_supplier_performance_endpoint(client):
    s = make_supplier(client)
    d = make_device(client)
    order = create_resource_and_assert(client, '/suppliers/orders', {
        'supplier_id': s['id'], 'items': [{'device_id': d['id'], 'quantity': 1, 'unit_cost': 50}], 'expected_delivery': '2099-12-31',
    })
    client.post(f"/suppliers/orders/{order['id']}/place")
    client.post(f"/suppliers/orders/{order['id']}/receive")
    [row] = client.get('/suppliers/orders/performance').get_json()['data']
    assert row['supplier_id'] == s['id']
    assert row['completed_orders'] == 1
    assert row['order_completion_rate'] == 100.0
    assert row['on_time_delivery_rate'] == 100.0
    assert row['total_spend'] == 50.0
