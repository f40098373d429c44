from phoneshop.services import devices as device_service
from phoneshop.services import repairs as repair_service
from phoneshop.services import sales as sale_service
from phoneshop.services import supplier_orders as order_service
from phoneshop.services import suppliers as supplier_service
from phoneshop.services import trade_ins as trade_in_service
from phoneshop.services import warranty_claims as claim_service


def test_repair_queries(session, seeded):
    assert [t.ticket_code for t in repair_service.tickets_by_status(session, 'In Progress')] == ['REP002']
    assert [t.id for t in repair_service.tickets_by_customer(session, 1)] == [1]
    assert {t.status for t in repair_service.active_tickets(session)} == {'Received', 'In Progress'}
    # newest received first
    assert [t.id for t in repair_service.list_tickets(session)] == [3, 2, 4, 1]


def test_inventory_queries(session, seeded):
    stock = device_service.current_stock(session)
    assert stock[1] == 8 and stock[4] == 0
    assert [d.id for d in device_service.out_of_stock(session)] == [4]
    assert device_service.get_by_imei(session, '358240051111111').model == 'Pixel 8 Pro'


def test_sales_queries(session, seeded):
    assert round(sale_service.total_revenue(session), 2) == 4445.93
    assert [s.id for s in sale_service.sales_by_customer(session, 1)] == [4, 1]
    assert [s.id for s in sale_service.recent_sales(session, 3)] == [6, 5, 4]


def test_supplier_queries(session, seeded):
    assert [s.name for s in supplier_service.active_suppliers(session)] == ['Mobile Parts Direct', 'TechSource Wholesale']
    assert supplier_service.get_by_code(session, 'SUP003').status == 'Inactive'
    assert [o.id for o in order_service.orders_by_supplier(session, 2)] == [3, 2]


def test_trade_in_and_claim_queries(session, seeded):
    assert [t.trade_in_code for t in trade_in_service.trade_ins_by_customer(session, 5)] == ['TRADE004']
    assert [c.id for c in claim_service.claims_by_sale(session, 2)] == [2]
    assert len(claim_service.claims_by_status(session, None)) == 3
    assert [c.id for c in claim_service.claims_by_status(session, 'Pending')] == [3]


def test_receiving_seeded_order_restocks(session, seeded):
    order_service.receive_order(session, 3)
    stock = device_service.current_stock(session)
    assert stock[4] == 10
    assert stock[8] == 34
