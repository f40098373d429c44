from tests.test_lifecycle_helpers import make_device


def test_etag_conditional_inventory(client):
    make_device(client)
    first = client.get('/inventory/devices?limit=5')
    assert first.status_code == 200
    etag = first.headers.get('ETag')
    assert etag
    second = client.get('/inventory/devices?limit=5', headers={'If-None-Match': etag})
    assert second.status_code == 304
    assert second.headers.get('ETag') == etag
    lm = first.headers.get('Last-Modified')
    if lm:
        third = client.get('/inventory/devices?limit=5', headers={'If-Modified-Since': lm})
        assert third.status_code == 304


def test_etag_changes_after_update(client):
    d = make_device(client)
    first = client.get(f"/inventory/devices/{d['id']}")
    etag = first.headers.get('ETag')
    assert client.get(f"/inventory/devices/{d['id']}", headers={'If-None-Match': etag}).status_code == 304
    client.put(f"/inventory/devices/{d['id']}/stock", json={'quantity': 99})
    listing = client.get('/inventory/devices')
    assert listing.get_json()['data'][0]['quantity'] == 99
