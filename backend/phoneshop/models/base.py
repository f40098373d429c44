from __future__ import annotations
from sqlalchemy.orm import declarative_base, Mapped, mapped_column
from sqlalchemy import Integer, String

Base = declarative_base()


class IdSequence(Base):
    """High-water mark of the ids handed out per collection."""
    __tablename__ = 'id_sequences'
    name: Mapped[str] = mapped_column(String(64), primary_key=True)
    last_id: Mapped[int] = mapped_column(Integer, nullable=False, default=0)


def entity_code(prefix: str, entity_id: int) -> str:
    """Human readable code such as CUST001 for id 1."""
    return f"{prefix}{entity_id:03d}"
