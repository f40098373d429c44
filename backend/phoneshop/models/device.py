from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime
from phoneshop.time_utils import utcnow
from .base import Base


class Device(Base):
    __tablename__ = 'devices'
    CONDITION_NEW = 'New'
    CONDITION_REFURBISHED = 'Refurbished'
    CONDITION_USED = 'Used'
    ALL_CONDITIONS = (CONDITION_NEW, CONDITION_REFURBISHED, CONDITION_USED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    name: Mapped[Optional[str]] = mapped_column(String(160), nullable=True)
    brand: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    model: Mapped[str] = mapped_column(String(96), nullable=False, index=True)
    category: Mapped[str] = mapped_column(String(64), nullable=False, default='Smartphone')
    condition: Mapped[str] = mapped_column(String(32), nullable=False, default=CONDITION_NEW)
    # quantity is the only stock signal; sales decrement it, supplier receipts increment it
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sale_price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    low_stock_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    imei: Mapped[Optional[str]] = mapped_column(String(32), nullable=True, index=True)
    serial_number: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
    supplier_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    date_added: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    @property
    def display_name(self) -> str:
        return self.name or f"{self.brand} {self.model}"
