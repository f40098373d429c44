from __future__ import annotations
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Integer, DateTime
from phoneshop.time_utils import utcnow
from .base import Base


class ReorderDismissal(Base):
    """A device whose auto-generated reorder suggestion was dismissed."""
    __tablename__ = 'reorder_dismissals'
    device_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    dismissed_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
