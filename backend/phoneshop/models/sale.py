from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime, JSON
from phoneshop.time_utils import utcnow
from .base import Base


class Sale(Base):
    """A completed POS transaction; immutable once created."""
    __tablename__ = 'sales'
    CODE_PREFIX = 'SALE'
    PAYMENT_CASH = 'Cash'
    PAYMENT_CARD = 'Card'
    PAYMENT_STORE_CREDIT = 'Store Credit'
    ALL_PAYMENT_METHODS = (PAYMENT_CASH, PAYMENT_CARD, PAYMENT_STORE_CREDIT)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    sale_code: Mapped[str] = mapped_column(String(16), unique=True, index=True, nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    # [{device_id, name, quantity, price}]
    items: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, default=list)
    subtotal: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tax: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    # discount percentage applied to the subtotal (0-100)
    discount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    payment_method: Mapped[str] = mapped_column(String(32), nullable=False, default=PAYMENT_CASH)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
