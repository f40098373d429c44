from __future__ import annotations
from datetime import datetime
from typing import Optional
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, String, Float, DateTime
from phoneshop.time_utils import utcnow
from .base import Base


class WarrantyClaim(Base):
    __tablename__ = 'warranty_claims'
    STATUS_PENDING = 'Pending'
    STATUS_SUBMITTED = 'Submitted'
    STATUS_APPROVED = 'Approved'
    STATUS_REJECTED = 'Rejected'
    STATUS_CLOSED = 'Closed'
    ALL_STATUSES = (STATUS_PENDING, STATUS_SUBMITTED, STATUS_APPROVED, STATUS_REJECTED, STATUS_CLOSED)
    # entering any of these stamps resolution_date once
    RESOLVED_STATUSES = (STATUS_APPROVED, STATUS_REJECTED, STATUS_CLOSED)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    sale_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    supplier_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    claim_date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    issue_description: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    serial_number: Mapped[str] = mapped_column(String(64), nullable=False, default='')
    claim_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[str] = mapped_column(String(32), nullable=False, default=STATUS_PENDING, index=True)
    supplier_response: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    resolution_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    resolution_notes: Mapped[str] = mapped_column(String(500), nullable=False, default='')
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)
