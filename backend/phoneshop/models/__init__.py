from .base import Base, IdSequence, entity_code
from .customer import Customer
from .device import Device
from .sale import Sale
from .repair_ticket import RepairTicket
from .supplier import Supplier
from .supplier_order import SupplierOrder
from .trade_in import TradeIn
from .warranty_claim import WarrantyClaim
from .reorder_dismissal import ReorderDismissal

__all__ = [
    'Base', 'IdSequence', 'entity_code',
    'Customer', 'Device', 'Sale', 'RepairTicket', 'Supplier',
    'SupplierOrder', 'TradeIn', 'WarrantyClaim', 'ReorderDismissal',
]
