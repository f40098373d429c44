import pytest
from phoneshop.errors import NotFoundError
from phoneshop.models import Customer, Device, IdSequence
from phoneshop.services.repository import IdAllocator, Repository


def _customers(session):
    return Repository(session, Customer, label='Customer', code_field='customer_code')


def test_create_assigns_sequential_ids_and_codes(session):
    repo = _customers(session)
    a = repo.create({'name': 'A'})
    b = repo.create({'name': 'B'})
    session.commit()
    assert (a.id, b.id) == (1, 2)
    assert a.customer_code == 'CUST001'
    assert b.customer_code == 'CUST002'


def test_ids_are_not_reused_after_delete(session):
    repo = _customers(session)
    repo.create({'name': 'A'})
    top = repo.create({'name': 'B'})
    session.commit()
    repo.delete(top.id)
    session.commit()
    again = repo.create({'name': 'C'})
    assert again.id == 3
    assert session.get(IdSequence, 'customers').last_id == 3


def test_explicit_ids_raise_high_water_mark(session):
    repo = Repository(session, Device)
    repo.create({'brand': 'Apple', 'model': 'X'}, entity_id=40)
    nxt = repo.create({'brand': 'Apple', 'model': 'Y'})
    assert nxt.id == 41
    assert IdAllocator(session, Device).next_id() == 42


def test_get_by_id_missing_raises(session):
    repo = _customers(session)
    with pytest.raises(NotFoundError) as exc:
        repo.get_by_id(7)
    assert str(exc.value) == 'Customer not found'
    assert repo.get('not-a-number') is None


def test_update_ignores_id_code_and_unknown_fields(session):
    repo = _customers(session)
    c = repo.create({'name': 'A'})
    repo.update(c.id, {'id': 99, 'customer_code': 'HACK', 'name': 'Renamed', 'bogus': 1})
    assert c.id == 1
    assert c.customer_code == 'CUST001'
    assert c.name == 'Renamed'


def test_find_filters_by_column(session):
    repo = Repository(session, Device)
    repo.create({'brand': 'Apple', 'model': 'X', 'imei': '111'})
    repo.create({'brand': 'Google', 'model': 'P', 'imei': '222'})
    assert [d.model for d in repo.find(brand='Google')] == ['P']
    assert repo.find_one(imei='111').model == 'X'
    assert repo.find_one(imei='333') is None
