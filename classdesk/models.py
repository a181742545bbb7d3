from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from classdesk.db import Base


class PaymentStatus(str, Enum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    OVERDUE = 'overdue'


class PaymentType(str, Enum):
    PER_LESSON = 'perLesson'
    MONTHLY = 'monthly'


class ViewMode(str, Enum):
    DAY = 'day'
    WEEK = 'week'
    MONTH = 'month'


class StorageSlot(Base):
    """One named key holding the full JSON snapshot of a collection or preference."""

    __tablename__ = 'storage_slots'

    key: Mapped[str] = mapped_column(String(80), primary_key=True)
    data_json: Mapped[str] = mapped_column(Text, default='null')
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, index=True)
