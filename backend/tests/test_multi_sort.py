from tests.test_lifecycle_helpers import make_supplier


def test_suppliers_multi_sort(client):
    make_supplier(client, name='Gamma', status='Inactive')
    make_supplier(client, name='Beta')
    make_supplier(client, name='Alpha')
    resp = client.get('/suppliers/suppliers?sort=status,-name')
    assert resp.status_code == 200
    names = [s['name'] for s in resp.get_json()['data']]
    assert names == ['Beta', 'Alpha', 'Gamma']


def test_default_order_kept_without_sort(client):
    make_supplier(client, name='Gamma')
    make_supplier(client, name='Alpha')
    names = [s['name'] for s in client.get('/suppliers/suppliers').get_json()['data']]
    assert names == ['Alpha', 'Gamma']
