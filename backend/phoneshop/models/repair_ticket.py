from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime
from phoneshop.time_utils import utcnow
from .base import Base

class RepairTicket(Base):
    __tablename__ = 'repair_tickets'
    CODE_PREFIX = 'REP'
    # Status constants
    STATUS_RECEIVED = 'Received'
    STATUS_DIAGNOSED = 'Diagnosed'
    STATUS_IN_PROGRESS = 'In Progress'
    STATUS_COMPLETED = 'Completed'
    STATUS_CANCELLED = 'Cancelled'
    ALL_STATUSES = (STATUS_RECEIVED, STATUS_DIAGNOSED, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)
    TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    ticket_code: Mapped[str] = mapped_column(String(16), unique=True, index=True, nullable=False)
    customer_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True, index=True)
    device_imei: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    device_model: Mapped[Optional[str]] = mapped_column(String(96), nullable=True)
    issue_description: Mapped[str] = mapped_column(String(500), nullable=False)
    diagnosis: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_RECEIVED, index=True)
    estimated_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    actual_cost: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    date_received: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    date_completed: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

# Status flow: Received -> Diagnosed -> In Progress -> Completed (Cancelled from any non-terminal state)
# Only the Completed transition stamps date_completed.
