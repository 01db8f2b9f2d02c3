"""SQLAlchemy ORM models for PomoTimer."""

from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class StoredValue(Base):
    """One persisted JSON blob, addressed by a storage key."""

    __tablename__ = "kv_store"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<StoredValue key={self.key} len={len(self.value or '')}>"
