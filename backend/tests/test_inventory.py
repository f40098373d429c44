from tests.test_lifecycle_helpers import assert_error, make_device


def test_device_crud_and_stock(client):
    d = make_device(client, imei='356000000000001')
    assert d['id'] == 1
    assert d['name'] == 'Apple iPhone 13'
    assert d['date_added'] is not None

    resp = client.put(f"/inventory/devices/{d['id']}", json={'sale_price': 450})
    assert resp.get_json()['sale_price'] == 450.0

    resp = client.put(f"/inventory/devices/{d['id']}/stock", json={'quantity': 3})
    assert resp.get_json()['quantity'] == 3
    assert_error(client.put(f"/inventory/devices/{d['id']}/stock", json={'quantity': -1}), 400)

    assert client.get('/inventory/devices/imei/356000000000001').get_json()['id'] == d['id']
    assert_error(client.get('/inventory/devices/imei/000'), 404)

    client.delete(f"/inventory/devices/{d['id']}")
    assert_error(client.get(f"/inventory/devices/{d['id']}"), 404)


def test_create_requires_brand_and_model(client):
    assert_error(client.post('/inventory/devices', json={'brand': 'Apple'}), 400, 'model')


def test_low_and_out_of_stock(client):
    make_device(client, model='A', quantity=0)
    make_device(client, model='B', quantity=4)
    make_device(client, model='C', quantity=10)
    low = [d['model'] for d in client.get('/inventory/devices/low-stock').get_json()['data']]
    assert low == ['B']
    out = [d['model'] for d in client.get('/inventory/devices/out-of-stock').get_json()['data']]
    assert out == ['A']
    low5 = [d['model'] for d in client.get('/inventory/devices/low-stock?threshold=5').get_json()['data']]
    assert low5 == ['B']


def test_filters_and_sorting(client):
    make_device(client, brand='Apple', model='iPhone 13', sale_price=500)
    make_device(client, brand='Google', model='Pixel 8', sale_price=700)
    make_device(client, brand='Apple', model='iPhone 15', sale_price=900)
    resp = client.get('/inventory/devices?brand=apple&sort=-sale_price')
    assert [d['model'] for d in resp.get_json()['data']] == ['iPhone 15', 'iPhone 13']
    assert_error(client.get('/inventory/devices?sort=bogus'), 400, 'Invalid sort field')
    assert_error(client.get('/inventory/devices?condition=Broken'), 400)
