from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime, JSON
from phoneshop.time_utils import utcnow
from .base import Base


class Customer(Base):
    __tablename__ = 'customers'
    CODE_PREFIX = 'CUST'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_code: Mapped[str] = mapped_column(String(16), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(128), nullable=False, default='')
    phone: Mapped[str] = mapped_column(String(32), nullable=False, default='')
    address: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    registration_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    purchase_history: Mapped[List[int]] = mapped_column(JSON, default=list)
    repair_history: Mapped[List[int]] = mapped_column(JSON, default=list)
    loyalty_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    store_credit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    notes: Mapped[Dict[str, Any]] = mapped_column(JSON, default=dict)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
