from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime, JSON
from phoneshop.time_utils import utcnow
from .base import Base


class SupplierOrder(Base):
    __tablename__ = 'supplier_orders'
    # Status constants
    STATUS_PENDING = 'Pending'
    STATUS_ORDERED = 'Ordered'
    STATUS_RECEIVED = 'Received'
    STATUS_CANCELLED = 'Cancelled'
    ALL_STATUSES = (STATUS_PENDING, STATUS_ORDERED, STATUS_RECEIVED, STATUS_CANCELLED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    supplier_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    order_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    expected_delivery: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    received_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_PENDING, index=True)
    # [{device_id, quantity, unit_cost}]
    items: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    # always derived from items
    total_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
