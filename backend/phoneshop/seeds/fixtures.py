from __future__ import annotations
"""Load the bundled JSON fixtures into an empty store.

Idempotent: a collection that already holds rows is left alone. Rows keep the
ids from the files, and the id allocator is told about them so new records
continue after the highest fixture id.
"""
import json
import logging
import os
from typing import Any, Dict, List, Tuple, Type

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from phoneshop.models import Customer, Device, RepairTicket, Sale, Supplier, SupplierOrder, TradeIn, WarrantyClaim
from phoneshop.services.repository import Repository
from phoneshop.time_utils import parse_iso_datetime

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')

# (file, model, code field, datetime fields) in dependency order
FIXTURES: List[Tuple[str, Type[Any], Any, Tuple[str, ...]]] = [
    ('suppliers.json', Supplier, 'supplier_code', ()),
    ('customers.json', Customer, 'customer_code', ('registration_date',)),
    ('devices.json', Device, None, ('date_added',)),
    ('sales.json', Sale, 'sale_code', ('timestamp',)),
    ('repairTickets.json', RepairTicket, 'ticket_code', ('date_received', 'date_completed')),
    ('supplierOrders.json', SupplierOrder, None, ('order_date', 'expected_delivery', 'received_date')),
    ('tradeIns.json', TradeIn, 'trade_in_code', ('timestamp',)),
    ('warrantyClaims.json', WarrantyClaim, None, ('claim_date', 'resolution_date')),
]


def read_fixture(filename: str) -> List[Dict[str, Any]]:
    with open(os.path.join(DATA_DIR, filename), encoding='utf-8') as fh:
        return json.load(fh)


def load_fixtures(session: Session) -> Dict[str, int]:
    """Seed every empty collection; returns rows loaded per table."""
    loaded: Dict[str, int] = {}
    for filename, model, code_field, date_fields in FIXTURES:
        if session.execute(select(func.count()).select_from(model)).scalar():
            loaded[model.__tablename__] = 0
            continue
        repo = Repository(session, model, code_field=code_field)
        rows = read_fixture(filename)
        for row in rows:
            fields = dict(row)
            entity_id = int(fields.pop('id'))
            for key in date_fields:
                if key in fields:
                    fields[key] = parse_iso_datetime(fields[key])
            repo.create(fields, entity_id=entity_id)
        loaded[model.__tablename__] = len(rows)
    session.commit()
    logger.info("fixtures loaded: %s", ', '.join(f"{k}={v}" for k, v in loaded.items()))
    return loaded
