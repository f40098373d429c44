def test_unknown_path_returns_error_json(client):
    resp = client.get('/non-existent-path')
    # Flask default 404 should be wrapped by error handler
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['error']['status'] == 404
    assert 'detail' in body['error']


def test_not_found_entity_shape(client):
    resp = client.get('/customers/999')
    assert resp.status_code == 404
    body = resp.get_json()
    assert body['error'] == {'status': 404, 'title': 'Not Found', 'detail': 'Customer not found'}


def test_validation_error_shape(client):
    resp = client.post('/customers', json={'email': 'nobody@example.com'})
    assert resp.status_code == 400
    body = resp.get_json()
    assert body['error']['title'] == 'Bad Request'
    assert 'name' in body['error']['detail']


def test_internal_error_shape(client, monkeypatch):
    import phoneshop.routes.customers as cust_mod

    def boom_list(session):
        raise RuntimeError('explode')

    monkeypatch.setattr(cust_mod.customer_service, 'list_customers', boom_list)
    resp = client.get('/customers')
    assert resp.status_code == 500
    body = resp.get_json()
    assert body['error']['status'] == 500
    assert body['error']['title'] == 'Internal Server Error'


def test_healthz(client):
    resp = client.get('/healthz')
    assert resp.status_code == 200
    assert resp.get_json() == {'status': 'ok'}
