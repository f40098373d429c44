from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, Boolean, DateTime
from phoneshop.time_utils import utcnow
from .base import Base


class TradeIn(Base):
    __tablename__ = 'trade_ins'
    CODE_PREFIX = 'TRADE'
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    trade_in_code: Mapped[str] = mapped_column(String(16), unique=True, index=True, nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    brand: Mapped[str] = mapped_column(String(64), nullable=False)
    model: Mapped[str] = mapped_column(String(96), nullable=False)
    condition: Mapped[str] = mapped_column(String(32), nullable=False)
    offer_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    accepted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    timestamp: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
