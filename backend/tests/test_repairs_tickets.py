from tests.test_lifecycle_helpers import (
    assert_error, assert_transition, create_resource_and_assert, exercise_repair_ticket_lifecycle, make_customer,
)


def test_repair_ticket_lifecycle(client):
    c = make_customer(client)
    ticket = exercise_repair_ticket_lifecycle(client, c['id'])
    assert ticket['ticket_code'] == 'REP001'
    assert client.get(f"/customers/{c['id']}").get_json()['repair_history'] == [ticket['id']]


def test_repair_ticket_invalid_transitions(client):
    t = create_resource_and_assert(client, '/repairs/tickets', {'issue_description': 'No power'}, expected_initial_status='Received')
    tid = t['id']
    # Complete before start
    assert_transition(client, f'/repairs/tickets/{tid}/complete', 400)
    assert_transition(client, f'/repairs/tickets/{tid}/start', 400)
    resp = assert_transition(client, f'/repairs/tickets/{tid}/cancel', 200, 'Cancelled')
    # only Completed stamps the completion date
    assert resp.get_json()['date_completed'] is None
    assert_transition(client, f'/repairs/tickets/{tid}/diagnose', 400)
    assert_error(client.post(f'/repairs/tickets/{tid}/explode'), 404)


def test_status_update_through_put_uses_state_machine(client):
    t = create_resource_and_assert(client, '/repairs/tickets', {'issue_description': 'Speaker'})
    resp = client.put(f"/repairs/tickets/{t['id']}", json={'status': 'Completed'})
    assert_error(resp, 400, 'Received -> Completed')
    resp = client.put(f"/repairs/tickets/{t['id']}", json={'status': 'Diagnosed', 'diagnosis': 'Blown driver'})
    assert resp.status_code == 200
    assert resp.get_json()['status'] == 'Diagnosed'
    assert resp.get_json()['diagnosis'] == 'Blown driver'


def test_ticket_requires_issue_and_known_customer(client):
    assert_error(client.post('/repairs/tickets', json={'device_model': 'X'}), 400, 'issue_description')
    assert_error(client.post('/repairs/tickets', json={'issue_description': 'x', 'customer_id': 77}), 404)


def test_active_tickets_and_filters(client):
    c = make_customer(client)
    a = create_resource_and_assert(client, '/repairs/tickets', {'issue_description': 'a', 'customer_id': c['id']})
    b = create_resource_and_assert(client, '/repairs/tickets', {'issue_description': 'b'})
    client.post(f"/repairs/tickets/{b['id']}/cancel")
    active = [t['id'] for t in client.get('/repairs/tickets/active').get_json()['data']]
    assert active == [a['id']]
    by_status = client.get('/repairs/tickets?status=Cancelled').get_json()['data']
    assert [t['id'] for t in by_status] == [b['id']]
    by_customer = client.get(f"/repairs/tickets?customer_id={c['id']}").get_json()['data']
    assert [t['id'] for t in by_customer] == [a['id']]
    client.delete(f"/repairs/tickets/{a['id']}")
    assert_error(client.get(f"/repairs/tickets/{a['id']}"), 404, 'Repair ticket not found')
